"""
Config Parser - Builds a MappingConfig from a parsed configuration tree

Every structural problem is raised here, before evaluation starts:
unknown operators or transform kinds, malformed paths, unknown contexts,
missing transform parameters and regular expressions that do not compile.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from datamapper.condition.evaluator import ConditionEvaluator
from datamapper.exceptions import InvalidConfigError, PathSyntaxError
from datamapper.resolver.path_resolver import PathResolver
from datamapper.schema.models import (
    CollectionMapping,
    Condition,
    ConditionOperator,
    ContextDef,
    FieldMapping,
    ItemFieldMapping,
    MappingConfig,
    Transform,
    TransformKind,
)
from datamapper.schema.values import ABSENT
from datamapper.transformer.registry import TransformerRegistry

logger = logging.getLogger(__name__)

BINARY_OPERATORS = {
    ConditionOperator.EQUALS,
    ConditionOperator.NOT_EQUALS,
    ConditionOperator.MATCHES,
    ConditionOperator.GT,
    ConditionOperator.GTE,
    ConditionOperator.LT,
    ConditionOperator.LTE,
}

MEMBERSHIP_OPERATORS = {ConditionOperator.IN, ConditionOperator.NOT_IN}

# Rule keys that only apply to scalar rules
SCALAR_ONLY_KEYS = ("condition", "transforms", "default", "required")

# Parameters each transform kind cannot do without
REQUIRED_PARAMS = {
    TransformKind.FORMAT: ("pattern",),
    TransformKind.REPLACE: ("from",),
    TransformKind.CONCAT: ("parts",),
    TransformKind.MAP_LOOKUP: ("table",),
    TransformKind.DEFAULT: ("value",),
}


class ConfigParser:
    """Parses and validates mapping configuration trees"""

    def parse(self, tree: Any) -> MappingConfig:
        """
        Parse a configuration tree

        Args:
            tree: Parsed YAML/JSON document

        Returns:
            MappingConfig: Validated configuration

        Raises:
            InvalidConfigError: If the configuration is structurally invalid
        """
        if not isinstance(tree, dict):
            raise InvalidConfigError("Configuration must be a mapping")

        contexts = self._parse_contexts(tree.get("contexts") or {})

        raw_mappings = tree.get("mappings")
        if raw_mappings is None:
            raw_mappings = []
        if not isinstance(raw_mappings, list):
            raise InvalidConfigError("'mappings' must be a sequence", "mappings")

        mappings = [
            self._parse_rule(raw, f"mappings[{i}]", contexts)
            for i, raw in enumerate(raw_mappings)
        ]

        logger.info(f"Parsed configuration: {len(contexts)} contexts, {len(mappings)} mappings")
        return MappingConfig(contexts=contexts, mappings=mappings)

    def _parse_contexts(self, raw: Any) -> Dict[str, ContextDef]:
        if not isinstance(raw, dict):
            raise InvalidConfigError("'contexts' must be a mapping", "contexts")

        contexts = {}
        for name, definition in raw.items():
            where = f"contexts.{name}"
            if isinstance(definition, str):
                definition = {"basePath": definition}
            if not isinstance(definition, dict):
                raise InvalidConfigError("Context must be a mapping", where)

            base_path = self._path(definition.get("basePath"), f"{where}.basePath")
            target_prefix = definition.get("targetPrefix")
            if target_prefix is not None:
                target_prefix = self._path(target_prefix, f"{where}.targetPrefix", allow_empty=True)

            contexts[str(name)] = ContextDef(str(name), base_path, target_prefix)

        return contexts

    def _parse_rule(self, raw: Any, where: str, contexts: Dict[str, ContextDef]) -> FieldMapping:
        if not isinstance(raw, dict):
            raise InvalidConfigError("Mapping rule must be a mapping", where)

        context = raw.get("context")
        if context is not None and context not in contexts:
            raise InvalidConfigError(f"Unknown context '{context}'", f"{where}.context")

        collection = None
        if raw.get("collection") is not None:
            for key in SCALAR_ONLY_KEYS:
                if key in raw:
                    raise InvalidConfigError(
                        f"'{key}' is not allowed on a collection rule; use the collection block",
                        f"{where}.{key}",
                    )
            collection = self._parse_collection(raw["collection"], f"{where}.collection", contexts)
            source = self._optional_path(raw.get("source"), f"{where}.source")
            target = self._optional_path(raw.get("target"), f"{where}.target")
        else:
            source = self._path(raw.get("source"), f"{where}.source")
            target = self._path(raw.get("target"), f"{where}.target")

        required = raw.get("required", False)
        if not isinstance(required, bool):
            raise InvalidConfigError("'required' must be a boolean", f"{where}.required")

        return FieldMapping(
            source=source,
            target=target,
            context=context,
            condition=self._parse_condition(raw.get("condition"), f"{where}.condition", contexts),
            transforms=self._parse_transforms(raw.get("transforms"), f"{where}.transforms"),
            collection=collection,
            default=raw["default"] if "default" in raw else ABSENT,
            required=required,
        )

    def _parse_collection(
        self,
        raw: Any,
        where: str,
        contexts: Dict[str, ContextDef],
    ) -> CollectionMapping:
        if not isinstance(raw, dict):
            raise InvalidConfigError("Collection must be a mapping", where)

        max_items = raw.get("maxItems")
        if max_items is None:
            max_items = 0
        if isinstance(max_items, bool) or not isinstance(max_items, int) or max_items < 0:
            raise InvalidConfigError("'maxItems' must be a non-negative integer", f"{where}.maxItems")

        raw_items = raw.get("itemMappings")
        if not isinstance(raw_items, list) or not raw_items:
            raise InvalidConfigError("'itemMappings' must be a non-empty sequence", f"{where}.itemMappings")

        item_mappings = []
        for i, item in enumerate(raw_items):
            item_where = f"{where}.itemMappings[{i}]"
            if not isinstance(item, dict):
                raise InvalidConfigError("Item mapping must be a mapping", item_where)
            target = item.get("target")
            if not isinstance(target, str) or not target:
                raise InvalidConfigError("'target' must be a non-empty string", f"{item_where}.target")
            item_mappings.append(
                ItemFieldMapping(
                    source=self._path(item.get("source", ""), f"{item_where}.source", allow_empty=True),
                    target=self._path(target, f"{item_where}.target"),
                    transforms=self._parse_transforms(item.get("transforms"), f"{item_where}.transforms"),
                    condition=self._parse_condition(item.get("condition"), f"{item_where}.condition", contexts),
                )
            )

        return CollectionMapping(
            source=self._path(raw.get("source"), f"{where}.source"),
            item_mappings=item_mappings,
            max_items=max_items,
            target_prefix=str(raw.get("targetPrefix") or ""),
            target_suffix=str(raw.get("targetSuffix") or ""),
            condition=self._parse_condition(raw.get("condition"), f"{where}.condition", contexts),
        )

    def _parse_condition(
        self,
        raw: Any,
        where: str,
        contexts: Dict[str, ContextDef],
    ) -> Optional[Condition]:
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise InvalidConfigError("Condition must be a mapping", where)

        try:
            op = ConditionOperator(raw.get("op"))
        except ValueError:
            raise InvalidConfigError(f"Unknown operator '{raw.get('op')}'", f"{where}.op")

        if "left" not in raw:
            raise InvalidConfigError("Condition needs a 'left' operand", where)

        values = raw.get("values")
        if op in MEMBERSHIP_OPERATORS:
            if values is None and isinstance(raw.get("right"), list):
                values = raw["right"]
            if not isinstance(values, list):
                raise InvalidConfigError(f"'{op.value}' needs a 'values' list", where)
        elif op in BINARY_OPERATORS and "right" not in raw:
            raise InvalidConfigError(f"'{op.value}' needs a 'right' operand", where)

        condition = Condition(
            op=op,
            left=raw["left"],
            right=raw.get("right"),
            values=values,
            ignore_case=bool(raw.get("ignoreCase", False)),
        )

        for side in ("left", "right"):
            operand = getattr(condition, side)
            if isinstance(operand, str) and operand.startswith(PathResolver.ROOT_PREFIX):
                self._path(operand, f"{where}.{side}")

        if op == ConditionOperator.MATCHES:
            if not isinstance(condition.right, str):
                raise InvalidConfigError("'matches' needs a regex string", f"{where}.right")
            if ConditionEvaluator(contexts).is_path_operand(condition.right):
                # compiled per evaluation from the resolved operand
                return condition
            condition.pattern = self._compile(
                condition.right,
                re.IGNORECASE if condition.ignore_case else 0,
                f"{where}.right",
            )

        return condition

    def _parse_transforms(self, raw: Any, where: str) -> List[Transform]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise InvalidConfigError("'transforms' must be a sequence", where)

        return [self._parse_transform(step, f"{where}[{i}]") for i, step in enumerate(raw)]

    def _parse_transform(self, raw: Any, where: str) -> Transform:
        if isinstance(raw, str):
            raw = {"kind": raw}
        if not isinstance(raw, dict):
            raise InvalidConfigError("Transform must be a mapping or a kind name", where)

        try:
            kind = TransformKind(raw.get("kind"))
        except ValueError:
            raise InvalidConfigError(f"Unknown transform kind '{raw.get('kind')}'", f"{where}.kind")

        params = {key: value for key, value in raw.items() if key != "kind"}
        for name in REQUIRED_PARAMS.get(kind, ()):
            if name not in params:
                raise InvalidConfigError(f"'{kind.value}' needs parameter '{name}'", where)

        transform = Transform(kind=kind, params=params)

        if kind == TransformKind.FORMAT:
            pattern = params["pattern"]
            if not isinstance(pattern, str) or TransformerRegistry.count_placeholders(pattern) != 1:
                raise InvalidConfigError("'format' pattern needs exactly one placeholder", f"{where}.pattern")
        elif kind == TransformKind.REPLACE:
            if not isinstance(params["from"], str):
                raise InvalidConfigError("'replace' needs a string 'from'", f"{where}.from")
            if not isinstance(params.get("to", ""), str):
                raise InvalidConfigError("'replace' needs a string 'to'", f"{where}.to")
            if params.get("regex"):
                transform.pattern = self._compile(params["from"], 0, f"{where}.from")
        elif kind == TransformKind.CONCAT:
            parts = params["parts"]
            if not isinstance(parts, list):
                raise InvalidConfigError("'concat' parts must be a sequence", f"{where}.parts")
            if not isinstance(params.get("separator", ""), str):
                raise InvalidConfigError("'concat' separator must be a string", f"{where}.separator")
            for i, part in enumerate(parts):
                if isinstance(part, str) and part.startswith(PathResolver.ROOT_PREFIX):
                    self._path(part, f"{where}.parts[{i}]")
        elif kind == TransformKind.MAP_LOOKUP:
            if not isinstance(params["table"], dict):
                raise InvalidConfigError("'mapLookup' table must be a mapping", f"{where}.table")

        return transform

    @staticmethod
    def _path(value: Any, where: str, allow_empty: bool = False) -> str:
        if not isinstance(value, str) or (not value.strip() and not allow_empty):
            raise InvalidConfigError("Expected a non-empty path string", where)
        try:
            PathResolver.parse(value)
        except PathSyntaxError as e:
            raise PathSyntaxError(e.message, where)
        return value

    def _optional_path(self, value: Any, where: str) -> str:
        if value is None:
            return ""
        return self._path(value, where, allow_empty=True)

    @staticmethod
    def _compile(pattern: str, flags: int, where: str):
        try:
            return re.compile(pattern, flags)
        except re.error as e:
            raise InvalidConfigError(f"Invalid regular expression: {e}", where)
