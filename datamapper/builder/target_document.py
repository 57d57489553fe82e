"""Target document accumulated during a mapping pass."""
from typing import Any, Dict


class TargetDocument:
    """Insertion-ordered mapping of target path -> value; last write wins."""

    def __init__(self):
        self._fields: Dict[str, Any] = {}

    def set(self, target_field: str, value: Any) -> None:
        self._fields[target_field] = value

    def get(self, target_field: str, default: Any = None) -> Any:
        return self._fields.get(target_field, default)

    def __contains__(self, target_field: str) -> bool:
        return target_field in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._fields)
