"""Dry-run report model."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Action(str, Enum):
    """Outcome of one rule evaluation"""

    SET = "SET"
    SKIPPED = "SKIPPED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class MappingEntryReport:
    """Outcome of a single rule (or collection item) evaluation."""

    source_path: str
    target_field: str
    raw_value: Any
    transformed_value: Optional[str]
    condition_passed: bool
    reason_if_skipped: Optional[str]
    action: Action
    is_sensitive: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourcePath": self.source_path,
            "targetField": self.target_field,
            "rawValue": self.raw_value,
            "transformedValue": self.transformed_value,
            "conditionPassed": self.condition_passed,
            "reasonIfSkipped": self.reason_if_skipped,
            "action": self.action.value,
            "isSensitive": self.is_sensitive,
        }


@dataclass
class CoverageSummary:
    """Applied/skipped counts for a run."""

    total_mappings: int = 0
    applied: int = 0
    skipped: int = 0
    coverage_percent: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalMappings": self.total_mappings,
            "applied": self.applied,
            "skipped": self.skipped,
            "coveragePercent": self.coverage_percent,
        }


@dataclass
class DryRunReport:
    """Everything a mapping pass did, or would have done."""

    dry_run: bool
    timestamp: int  # epoch milliseconds
    config_used: str
    mappings: List[MappingEntryReport] = field(default_factory=list)
    coverage: CoverageSummary = field(default_factory=CoverageSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dryRun": self.dry_run,
            "timestamp": self.timestamp,
            "configUsed": self.config_used,
            "mappings": [entry.to_dict() for entry in self.mappings],
            "coverage": self.coverage.to_dict(),
        }
