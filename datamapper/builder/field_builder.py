"""
Field Builder - Evaluates one source value into one target field

Shared by scalar rules and collection item mappings:
- default substitution and required check
- transform pipeline
- guard evaluation
- report entry and (unless dry-run) target write
"""

from typing import Any, List, Optional

from datamapper.builder.report_builder import ReportBuilder
from datamapper.builder.target_document import TargetDocument
from datamapper.condition.evaluator import ConditionEvaluator
from datamapper.exceptions import TransformError
from datamapper.schema.models import Condition, Transform
from datamapper.schema.report import Action, MappingEntryReport
from datamapper.schema.values import ABSENT
from datamapper.transformer.registry import TransformerRegistry

MISSING_REQUIRED = "missing required"
SOURCE_ABSENT = "source absent"


class FieldBuilder:
    """Builds individual target fields for one mapping pass"""

    def __init__(
        self,
        registry: TransformerRegistry,
        evaluator: ConditionEvaluator,
        report: ReportBuilder,
        target: TargetDocument,
        dry_run: bool,
    ):
        self.registry = registry
        self.evaluator = evaluator
        self.report = report
        self.target = target
        self.dry_run = dry_run

    def build_field(
        self,
        source_path: str,
        target_field: str,
        raw_value: Any,
        transforms: List[Transform],
        condition: Optional[Condition],
        scope: Any,
        root: Any,
        default: Any = ABSENT,
        required: bool = False,
    ) -> MappingEntryReport:
        """
        Evaluate one field and record exactly one report entry

        Args:
            source_path: Effective source path (for the report)
            target_field: Effective target field
            raw_value: Resolved source value, ABSENT if the path did not resolve
            transforms: Transform pipeline
            condition: Guard, None if unconditional
            scope: Value "$." paths resolve against
            root: Whole source document
            default: Substituted when raw_value is ABSENT
            required: Record ERROR when no value is available

        Returns:
            The appended report entry
        """
        value = raw_value
        if value is ABSENT and default is not ABSENT:
            value = default

        if value is ABSENT and required:
            # A failed guard means the rule did not apply, so it is not an error
            guard = self.evaluator.evaluate(condition, scope, root)
            if not guard.passed:
                return self.report.record(
                    source_path, target_field, raw_value, ABSENT,
                    Action.SKIPPED, False, guard.reason,
                )
            return self.report.record(
                source_path, target_field, raw_value, ABSENT,
                Action.ERROR, True, MISSING_REQUIRED,
            )

        try:
            value = self.registry.apply_all(value, transforms, scope)
        except TransformError as e:
            return self.report.record(
                source_path, target_field, raw_value, ABSENT,
                Action.ERROR, False, str(e),
            )

        guard = self.evaluator.evaluate(condition, scope, root)
        if not guard.passed:
            return self.report.record(
                source_path, target_field, raw_value, value,
                Action.SKIPPED, False, guard.reason,
            )

        if value is ABSENT:
            return self.report.record(
                source_path, target_field, raw_value, ABSENT,
                Action.SKIPPED, True, SOURCE_ABSENT,
            )

        if not self.dry_run:
            self.target.set(target_field, value)

        return self.report.record(
            source_path, target_field, raw_value, value,
            Action.SET, True, None,
        )
