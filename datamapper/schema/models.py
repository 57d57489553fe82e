"""Mapping configuration model."""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from datamapper.schema.values import ABSENT


class ConditionOperator(str, Enum):
    """Guard operators"""

    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    IN = "in"
    NOT_IN = "notIn"
    MATCHES = "matches"
    EXISTS = "exists"
    NOT_EXISTS = "notExists"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


class TransformKind(str, Enum):
    """Value transforms"""

    TRIM = "trim"
    UPPER = "upper"
    LOWER = "lower"
    TITLE_CASE = "titleCase"
    TO_INT = "toInt"
    TO_NUMBER = "toNumber"
    TO_BOOL = "toBool"
    TO_STRING = "toString"
    FORMAT = "format"
    REPLACE = "replace"
    CONCAT = "concat"
    MAP_LOOKUP = "mapLookup"
    DEFAULT = "default"


@dataclass
class ContextDef:
    """Named base path shared by a group of rules."""

    name: str
    base_path: str
    target_prefix: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"basePath": self.base_path, "targetPrefix": self.target_prefix}


@dataclass
class Condition:
    """Guard attached to a rule, a collection or an item mapping."""

    op: ConditionOperator
    left: Any
    right: Any = None
    values: Optional[List[Any]] = None
    ignore_case: bool = False
    pattern: Optional[re.Pattern] = field(default=None, repr=False, compare=False)  # compiled for "matches"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "op": self.op.value,
            "left": self.left,
            "right": self.right,
            "values": self.values,
            "ignoreCase": self.ignore_case,
        }


@dataclass
class Transform:
    """One step of a transform pipeline."""

    kind: TransformKind
    params: Dict[str, Any] = field(default_factory=dict)
    pattern: Optional[re.Pattern] = field(default=None, repr=False, compare=False)  # compiled regex "replace"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, **self.params}


@dataclass
class ItemFieldMapping:
    """Maps a sub-path of a collection item to a target sub-field."""

    source: str
    target: str
    transforms: List[Transform] = field(default_factory=list)
    condition: Optional[Condition] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "transforms": [t.to_dict() for t in self.transforms],
            "condition": self.condition.to_dict() if self.condition else None,
        }


@dataclass
class CollectionMapping:
    """Expands a source sequence into numbered target fields."""

    source: str
    item_mappings: List[ItemFieldMapping] = field(default_factory=list)
    max_items: int = 0  # 0 = no cap
    target_prefix: str = ""
    target_suffix: str = ""
    condition: Optional[Condition] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "maxItems": self.max_items,
            "targetPrefix": self.target_prefix,
            "targetSuffix": self.target_suffix,
            "condition": self.condition.to_dict() if self.condition else None,
            "itemMappings": [m.to_dict() for m in self.item_mappings],
        }


@dataclass
class FieldMapping:
    """A single mapping rule."""

    source: str
    target: str
    context: Optional[str] = None
    condition: Optional[Condition] = None
    transforms: List[Transform] = field(default_factory=list)
    collection: Optional[CollectionMapping] = None
    default: Any = ABSENT  # ABSENT = no default configured
    required: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not ABSENT

    @property
    def is_collection(self) -> bool:
        return self.collection is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "source": self.source,
            "target": self.target,
            "context": self.context,
            "condition": self.condition.to_dict() if self.condition else None,
            "transforms": [t.to_dict() for t in self.transforms],
            "required": self.required,
            "collection": self.collection.to_dict() if self.collection else None,
        }
        if self.has_default:
            data["default"] = self.default
        return data


@dataclass
class MappingConfig:
    """Parsed mapping configuration."""

    contexts: Dict[str, ContextDef] = field(default_factory=dict)
    mappings: List[FieldMapping] = field(default_factory=list)

    def get_context(self, name: Optional[str]) -> Optional[ContextDef]:
        if name is None:
            return None
        return self.contexts.get(name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contexts": {name: ctx.to_dict() for name, ctx in self.contexts.items()},
            "mappings": [m.to_dict() for m in self.mappings],
        }
