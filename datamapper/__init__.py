"""
Data Mapper - declarative source-to-target document mapping

Runs a mapping configuration against a source document and produces either
the materialized target document or a dry-run report describing every
mapping that fired, was skipped, or failed.
"""

from .mapper.engine import DataMapper, MapOptions
from .exceptions import (
    MappingError,
    InvalidConfigError,
    PathSyntaxError,
    DocumentLoadError,
    TransformError,
)

__version__ = "0.1.0"

__all__ = [
    "DataMapper",
    "MapOptions",
    "MappingError",
    "InvalidConfigError",
    "PathSyntaxError",
    "DocumentLoadError",
    "TransformError",
]
