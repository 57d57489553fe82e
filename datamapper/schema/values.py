"""Document values: absent marker, value kinds and text rendering."""
import json
import math
import re
from enum import Enum
from typing import Any, Optional


class _Absent:
    """Marker for a path that does not exist in a document."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "ABSENT"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


ABSENT = _Absent()

# plain decimal literal: no inf/nan, no digit separators
NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class ValueKind(Enum):
    """Kinds of values a parsed document can hold"""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(value: Any) -> ValueKind:
    """
    Classify a document value

    bool is checked before int since bool is an int subclass. Scalars the
    parsers may produce beyond JSON (dates from YAML) count as strings.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    return ValueKind.STRING


def to_text(value: Any) -> Optional[str]:
    """
    Render a value as a string

    Returns None for null and absent values. Booleans render as JSON
    literals, containers as compact JSON.
    """
    if value is None or value is ABSENT:
        return None

    kind = kind_of(value)
    if kind == ValueKind.BOOL:
        return "true" if value else "false"
    if kind in (ValueKind.SEQUENCE, ValueKind.MAPPING):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def to_number(value: Any) -> Optional[float]:
    """Numeric reading of a value, or None if it has none."""
    kind = kind_of(value)
    if kind in (ValueKind.INT, ValueKind.FLOAT):
        return value
    if kind == ValueKind.STRING:
        text = str(value).strip()
        if not NUMBER_PATTERN.fullmatch(text):
            return None
        number = float(text)
        return number if math.isfinite(number) else None
    return None
