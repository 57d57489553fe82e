"""
Report Builder - Accumulates per-rule outcomes for a mapping pass

Entries are appended in evaluation order. Sensitivity is decided from the
target field's last segment and sensitive values are masked before the
entry is stored, so the raw value never reaches the report.
"""

import logging
import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Optional

from datamapper.resolver.path_resolver import PathResolver
from datamapper.schema.report import Action, CoverageSummary, DryRunReport, MappingEntryReport
from datamapper.schema.values import ABSENT, to_text
from datamapper.sensitivity.detector import SensitiveFieldDetector

logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class ReportBuilder:
    """Append-only builder for a DryRunReport"""

    def __init__(
        self,
        config_used: str,
        dry_run: bool,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize ReportBuilder

        Args:
            config_used: Identifier of the configuration being applied
            dry_run: Whether target writes are suppressed for this pass
            clock: Returns the report timestamp in epoch milliseconds
        """
        self.report = DryRunReport(
            dry_run=dry_run,
            timestamp=(clock or _epoch_millis)(),
            config_used=config_used,
        )
        self._finalized = False

    def record(
        self,
        source_path: str,
        target_field: str,
        raw_value: Any,
        value: Any,
        action: Action,
        condition_passed: bool,
        reason: Optional[str] = None,
    ) -> MappingEntryReport:
        """
        Append one entry

        Args:
            source_path: Effective source path evaluated
            target_field: Target field written (or that would have been)
            raw_value: Value resolved from the source, ABSENT if none
            value: Value after transforms, ABSENT if none
            action: SET, SKIPPED or ERROR
            condition_passed: Whether the guard held
            reason: Why the entry was skipped or failed

        Returns:
            The appended entry
        """
        if self._finalized:
            raise RuntimeError("Report already finalized")

        field_name = PathResolver.last_segment(target_field)
        sensitive = SensitiveFieldDetector.is_sensitive(field_name)

        raw = None if raw_value is ABSENT else raw_value
        if sensitive:
            raw = SensitiveFieldDetector.mask_for_field(field_name, raw)
            rendered = SensitiveFieldDetector.mask_for_field(field_name, value)
        else:
            rendered = to_text(value)

        entry = MappingEntryReport(
            source_path=source_path,
            target_field=target_field,
            raw_value=raw,
            transformed_value=rendered,
            condition_passed=condition_passed,
            reason_if_skipped=reason,
            action=action,
            is_sensitive=sensitive,
        )
        self.report.mappings.append(entry)

        if action == Action.ERROR:
            logger.warning(f"{source_path} -> {target_field}: {reason}")
        elif action == Action.SKIPPED:
            logger.debug(f"{source_path} -> {target_field} skipped: {reason}")

        return entry

    def finalize(self) -> DryRunReport:
        """Compute coverage (once) and return the report."""
        if self._finalized:
            return self.report

        entries = self.report.mappings
        total = len(entries)
        applied = sum(1 for entry in entries if entry.action == Action.SET)

        self.report.coverage = CoverageSummary(
            total_mappings=total,
            applied=applied,
            skipped=total - applied,
            coverage_percent=self.coverage_percent(applied, total),
        )
        self._finalized = True
        return self.report

    @staticmethod
    def coverage_percent(applied: int, total: int) -> float:
        """applied / total * 100, rounded half-up to one decimal; 0 when empty."""
        if total == 0:
            return 0.0
        percent = Decimal(applied) * 100 / Decimal(total)
        return float(percent.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
