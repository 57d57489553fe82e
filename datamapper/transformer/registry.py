"""Transformer registry."""
import re
from typing import Any, Callable, Dict, List

from datamapper.exceptions import TransformError
from datamapper.resolver.path_resolver import PathResolver
from datamapper.schema.models import Transform, TransformKind
from datamapper.schema.values import ABSENT, ValueKind, kind_of, to_text

TRUE_WORDS = {"true", "yes", "y", "1", "on"}
FALSE_WORDS = {"false", "no", "n", "0", "off"}

# printf-style conversion; "%%" is matched so it can be excluded
PLACEHOLDER_PATTERN = re.compile(r'%%|%[-+ #0]*\d*(?:\.\d+)?[sdifFgGeExXocr]')

Transformer = Callable[[Any, Dict[str, Any], Any], Any]


class TransformerRegistry:
    """Registry of available transformers."""

    def __init__(self):
        """Initialize registry."""
        self.transformers: Dict[TransformKind, Transformer] = {
            TransformKind.TRIM: self._text_op(str.strip),
            TransformKind.UPPER: self._text_op(str.upper),
            TransformKind.LOWER: self._text_op(str.lower),
            TransformKind.TITLE_CASE: self._text_op(self._title_case),
            TransformKind.TO_INT: self._to_int,
            TransformKind.TO_NUMBER: self._to_number,
            TransformKind.TO_BOOL: self._to_bool,
            TransformKind.TO_STRING: lambda x, params, scope: to_text(x) if x is not ABSENT else x,
            TransformKind.FORMAT: self._format,
            TransformKind.REPLACE: self._replace,
            TransformKind.CONCAT: self._concat,
            TransformKind.MAP_LOOKUP: self._map_lookup,
            TransformKind.DEFAULT: lambda x, params, scope: params.get("value") if x is ABSENT else x,
        }

    def get(self, kind: TransformKind) -> Transformer:
        """Get transformer by kind."""
        return self.transformers[kind]

    def transform(self, value: Any, step: Transform, scope: Any = None) -> Any:
        """
        Apply one transform

        Args:
            value: Current value (may be ABSENT)
            step: Transform to apply
            scope: Value "$." path references resolve against

        Raises:
            TransformError: If the value cannot be converted
        """
        transformer = self.get(step.kind)
        params = dict(step.params)
        if step.pattern is not None:
            params["_pattern"] = step.pattern
        return transformer(value, params, scope)

    def apply_all(self, value: Any, steps: List[Transform], scope: Any = None) -> Any:
        """Apply transforms in declaration order."""
        for step in steps:
            value = self.transform(value, step, scope)
        return value

    @staticmethod
    def count_placeholders(pattern: str) -> int:
        return sum(1 for match in PLACEHOLDER_PATTERN.findall(pattern) if match != "%%")

    @staticmethod
    def _text_op(func: Callable[[str], str]) -> Transformer:
        def apply(value, params, scope):
            if value is None or value is ABSENT:
                return value
            return func(to_text(value))
        return apply

    @staticmethod
    def _title_case(text: str) -> str:
        return " ".join(word.capitalize() for word in text.split(" "))

    @staticmethod
    def _to_int(value: Any, params: Dict[str, Any], scope: Any) -> Any:
        """Convert to int; floats and numeric strings must be integral."""
        if value is None or value is ABSENT:
            return value

        kind = kind_of(value)
        if kind in (ValueKind.INT, ValueKind.BOOL):
            return int(value)
        if kind == ValueKind.FLOAT:
            if value.is_integer():
                return int(value)
            raise TransformError("toInt", f"{value!r} is not integral")
        if kind == ValueKind.STRING:
            text = str(value).strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                number = float(text)
            except ValueError:
                raise TransformError("toInt", f"{text!r} is not a number")
            if number.is_integer():
                return int(number)
            raise TransformError("toInt", f"{text!r} is not integral")

        raise TransformError("toInt", f"cannot convert {kind.value}")

    @staticmethod
    def _to_number(value: Any, params: Dict[str, Any], scope: Any) -> Any:
        if value is None or value is ABSENT:
            return value

        kind = kind_of(value)
        if kind in (ValueKind.INT, ValueKind.FLOAT):
            return value
        if kind == ValueKind.BOOL:
            return int(value)
        if kind == ValueKind.STRING:
            text = str(value).strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                return float(text)
            except ValueError:
                raise TransformError("toNumber", f"{text!r} is not a number")

        raise TransformError("toNumber", f"cannot convert {kind.value}")

    @staticmethod
    def _to_bool(value: Any, params: Dict[str, Any], scope: Any) -> Any:
        if value is None or value is ABSENT:
            return value

        kind = kind_of(value)
        if kind == ValueKind.BOOL:
            return value
        if kind in (ValueKind.INT, ValueKind.FLOAT) and value in (0, 1):
            return bool(value)
        if kind == ValueKind.STRING:
            word = str(value).strip().lower()
            if word in TRUE_WORDS:
                return True
            if word in FALSE_WORDS:
                return False

        raise TransformError("toBool", f"{value!r} is not a boolean")

    @staticmethod
    def _format(value: Any, params: Dict[str, Any], scope: Any) -> Any:
        """printf-style formatting with a single placeholder (e.g. "%05d", "%.2f kg")."""
        if value is None or value is ABSENT:
            return value

        pattern = params["pattern"]
        try:
            return pattern % (value,)
        except (TypeError, ValueError) as e:
            raise TransformError("format", str(e))

    @staticmethod
    def _replace(value: Any, params: Dict[str, Any], scope: Any) -> Any:
        if value is None or value is ABSENT:
            return value

        text = to_text(value)
        replacement = params.get("to", "")
        if params.get("regex"):
            pattern = params.get("_pattern") or re.compile(params["from"])
            try:
                return pattern.sub(replacement, text)
            except re.error as e:
                raise TransformError("replace", str(e))
        return text.replace(params["from"], replacement)

    @staticmethod
    def _concat(value: Any, params: Dict[str, Any], scope: Any) -> Any:
        """
        Join parts into one string

        "$" is the current value, "$.path" resolves against the scope,
        anything else is literal. Absent or null parts render as "".
        """
        pieces = []
        for part in params.get("parts", []):
            if part == "$":
                resolved = value
            elif isinstance(part, str) and part.startswith(PathResolver.ROOT_PREFIX):
                resolved = PathResolver.resolve(scope, part)
            else:
                resolved = part
            pieces.append(to_text(resolved) or "")

        return params.get("separator", "").join(pieces)

    @staticmethod
    def _map_lookup(value: Any, params: Dict[str, Any], scope: Any) -> Any:
        if value is ABSENT:
            return value

        table = params.get("table", {})
        key = to_text(value)
        if key is None:
            key = "null"
        if key in table:
            return table[key]
        if not isinstance(value, (list, dict)) and value in table:
            return table[value]

        if params.get("strict"):
            raise TransformError("mapLookup", f"no entry for {key!r}")
        return value
