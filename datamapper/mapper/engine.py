"""
Mapping Engine - Orchestrates a mapping pass

Integrates:
- ConfigParser: configuration tree -> validated MappingConfig
- PathResolver: context composition and source lookups
- FieldBuilder: transforms, guards, report entries and target writes
- CollectionExpander: rules over source sequences
- ReportBuilder: dry-run report and coverage
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from datamapper.builder.collection_expander import CollectionExpander
from datamapper.builder.field_builder import FieldBuilder
from datamapper.builder.report_builder import ReportBuilder
from datamapper.builder.target_document import TargetDocument
from datamapper.condition.evaluator import ConditionEvaluator
from datamapper.parser.config_parser import ConfigParser
from datamapper.parser.loader import DocumentLoader
from datamapper.resolver.path_resolver import PathResolver
from datamapper.schema.models import FieldMapping, MappingConfig
from datamapper.schema.report import DryRunReport
from datamapper.transformer.registry import TransformerRegistry

logger = logging.getLogger(__name__)

Loader = Callable[[str], Any]


@dataclass(frozen=True)
class MapOptions:
    """Per-call toggles for map_data"""

    dry_run: bool = False
    json_dry_run_output: bool = False  # True: return the report, False: the target document

    def with_dry_run(self, dry_run: bool) -> "MapOptions":
        return replace(self, dry_run=dry_run)

    def with_json_dry_run_output(self, json_output: bool) -> "MapOptions":
        return replace(self, json_dry_run_output=json_output)


@dataclass
class MappingResult:
    """Outputs of one mapping pass."""

    report: DryRunReport
    target: TargetDocument

    def payload(self, options: MapOptions) -> Dict[str, Any]:
        if options.json_dry_run_output:
            return self.report.to_dict()
        return self.target.to_dict()


class DataMapper:
    """
    Applies mapping configurations to source documents

    Usage:
    ```python
    mapper = DataMapper()
    options = MapOptions().with_dry_run(True).with_json_dry_run_output(True)

    report = mapper.map_data("/2.mapping-config.yml", "/2.data.json", options)
    # Returns: {"dryRun": true, "mappings": [...], "coverage": {...}}
    ```

    The mapper holds no per-call state; one instance may serve parallel calls.
    """

    def __init__(
        self,
        config_loader: Optional[Loader] = None,
        data_loader: Optional[Loader] = None,
        registry: Optional[TransformerRegistry] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize DataMapper

        Args:
            config_loader: Returns a parsed configuration tree for a reference
            data_loader: Returns a parsed source document for a reference
            registry: Transformer registry
            clock: Report timestamp source (epoch milliseconds)
        """
        self.config_loader = config_loader or DocumentLoader()
        self.data_loader = data_loader or DocumentLoader()
        self.config_parser = ConfigParser()
        self.registry = registry or TransformerRegistry()
        self.clock = clock

    def map_data(
        self,
        config_ref: str,
        data_ref: str,
        options: Optional[MapOptions] = None,
    ) -> Dict[str, Any]:
        """
        Run one mapping pass and return the selected payload

        Args:
            config_ref: Configuration reference, also reported as configUsed
            data_ref: Source document reference
            options: dry-run / output toggles

        Returns:
            The report (json_dry_run_output) or the target document

        Raises:
            InvalidConfigError: If the configuration is structurally invalid
            DocumentLoadError: If a document cannot be loaded
        """
        options = options or MapOptions()
        return self.run(config_ref, data_ref, options).payload(options)

    def run(self, config_ref: str, data_ref: str, options: Optional[MapOptions] = None) -> MappingResult:
        """Load both documents and evaluate every rule."""
        options = options or MapOptions()

        config = self.config_parser.parse(self.config_loader(config_ref))
        document = self.data_loader(data_ref)

        return self.apply(config, document, config_ref, options)

    def apply(
        self,
        config: MappingConfig,
        document: Any,
        config_used: str,
        options: Optional[MapOptions] = None,
    ) -> MappingResult:
        """
        Evaluate an already-parsed configuration against a document

        Rules are evaluated in declaration order; per-rule failures are
        recorded in the report and never abort the pass.
        """
        options = options or MapOptions()
        logger.info(f"Mapping with {config_used} ({len(config.mappings)} rules, dry_run={options.dry_run})")

        target = TargetDocument()
        report = ReportBuilder(config_used, options.dry_run, self.clock)
        field_builder = FieldBuilder(
            self.registry,
            ConditionEvaluator(config.contexts),
            report,
            target,
            options.dry_run,
        )
        expander = CollectionExpander(field_builder)

        for rule in config.mappings:
            self._apply_rule(rule, config, document, field_builder, expander)

        result = MappingResult(report=report.finalize(), target=target)

        coverage = result.report.coverage
        logger.info(
            f"Mapped {coverage.applied}/{coverage.total_mappings} fields "
            f"({coverage.coverage_percent}% coverage)"
        )
        return result

    @staticmethod
    def _apply_rule(
        rule: FieldMapping,
        config: MappingConfig,
        document: Any,
        field_builder: FieldBuilder,
        expander: CollectionExpander,
    ) -> None:
        context = config.get_context(rule.context)
        base_path = context.base_path if context else None
        target_prefix = context.target_prefix if context else None

        if rule.is_collection:
            expander.expand(
                rule.collection,
                source_path=PathResolver.join(base_path, rule.collection.source),
                target_field=PathResolver.join(target_prefix, rule.target),
                document=document,
                target_prefix=target_prefix,
            )
            return

        source_path = PathResolver.join(base_path, rule.source) if context else rule.source
        target_field = PathResolver.join(target_prefix, rule.target) if target_prefix else rule.target

        field_builder.build_field(
            source_path=source_path,
            target_field=target_field,
            raw_value=PathResolver.resolve(document, source_path),
            transforms=rule.transforms,
            condition=rule.condition,
            scope=document,
            root=document,
            default=rule.default,
            required=rule.required,
        )
