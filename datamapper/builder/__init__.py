"""
Builder Module

Produces the outputs of a mapping pass:
- FieldBuilder: per-field transform/guard/report/write pipeline
- CollectionExpander: per-item expansion of sequence sources
- ReportBuilder: append-only dry-run report with coverage
- TargetDocument: materialized target fields
"""

from .target_document import TargetDocument
from .report_builder import ReportBuilder
from .field_builder import FieldBuilder
from .collection_expander import CollectionExpander

__all__ = [
    "TargetDocument",
    "ReportBuilder",
    "FieldBuilder",
    "CollectionExpander",
]
