"""
Collection Expander - Maps each item of a source sequence

Transforms:
    items: [{sku: "A1"}, {sku: "B2"}, {sku: "C3"}]
With:
    collection: {source: items, maxItems: 2, targetPrefix: "item_",
                 itemMappings: [{source: sku, target: code}]}
Into:
    {"item_0.code": "A1", "item_1.code": "B2"}
"""

import logging
from typing import Any, List, Optional

from datamapper.builder.field_builder import FieldBuilder
from datamapper.resolver.path_resolver import PathResolver
from datamapper.schema.models import CollectionMapping
from datamapper.schema.report import Action, MappingEntryReport
from datamapper.schema.values import ABSENT

logger = logging.getLogger(__name__)

COLLECTION_ABSENT = "collection absent"


class CollectionExpander:
    """Expands collection rules into per-item report entries and target fields"""

    def __init__(self, field_builder: FieldBuilder):
        self.field_builder = field_builder

    def expand(
        self,
        collection: CollectionMapping,
        source_path: str,
        target_field: str,
        document: Any,
        target_prefix: Optional[str] = None,
    ) -> List[MappingEntryReport]:
        """
        Expand one collection rule

        Args:
            collection: Collection block of the rule
            source_path: Effective path of the sequence (context applied)
            target_field: Rule target, used for the "collection absent" entry
            document: Source document
            target_prefix: Context target prefix applied to every emitted field

        Returns:
            Entries recorded for this rule
        """
        report = self.field_builder.report
        items = PathResolver.resolve(document, source_path)

        if not isinstance(items, (list, tuple)) or not items:
            entry = report.record(
                source_path, target_field or collection.target_prefix, None, ABSENT,
                Action.SKIPPED, False, COLLECTION_ABSENT,
            )
            return [entry]

        limit = len(items)
        if collection.max_items:
            limit = min(limit, collection.max_items)

        logger.debug(f"Expanding {source_path}: {limit} of {len(items)} items")

        entries = []
        for index in range(limit):
            entries.extend(
                self._expand_item(collection, source_path, items[index], index, document, target_prefix)
            )
        return entries

    def _expand_item(
        self,
        collection: CollectionMapping,
        source_path: str,
        item: Any,
        index: int,
        document: Any,
        target_prefix: Optional[str],
    ) -> List[MappingEntryReport]:
        item_path = f"{source_path}[{index}]"
        item_field = f"{collection.target_prefix}{index}{collection.target_suffix}"
        if target_prefix:
            item_field = f"{PathResolver.join(target_prefix)}.{item_field}"

        guard = self.field_builder.evaluator.evaluate(collection.condition, item, document)
        if not guard.passed:
            entry = self.field_builder.report.record(
                item_path, item_field, item, ABSENT,
                Action.SKIPPED, False, guard.reason,
            )
            return [entry]

        entries = []
        for item_mapping in collection.item_mappings:
            entries.append(
                self.field_builder.build_field(
                    source_path=PathResolver.join(item_path, item_mapping.source),
                    target_field=f"{item_field}.{item_mapping.target}",
                    raw_value=PathResolver.resolve(item, item_mapping.source),
                    transforms=item_mapping.transforms,
                    condition=item_mapping.condition,
                    scope=item,
                    root=document,
                )
            )
        return entries
