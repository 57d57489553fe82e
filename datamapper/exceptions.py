"""Exceptions raised by the data mapper."""
from typing import Optional


class MappingError(Exception):
    """Base class for data mapper errors."""


class InvalidConfigError(MappingError, ValueError):
    """Mapping configuration is structurally invalid."""

    def __init__(self, message: str, location: Optional[str] = None):
        self.message = message
        self.location = location
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


class PathSyntaxError(InvalidConfigError):
    """Path expression cannot be parsed."""


class DocumentLoadError(MappingError):
    """Configuration or data document could not be loaded."""

    def __init__(self, ref: str, reason: str):
        self.ref = ref
        self.reason = reason
        super().__init__(f"Cannot load '{ref}': {reason}")


class TransformError(MappingError):
    """A transform could not be applied to a value."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"transform {kind} failed: {reason}")
