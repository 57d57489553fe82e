"""
Path Resolver - Locates values inside parsed documents

Path syntax:
- "." descends into a mapping ("user.name")
- "[i]" indexes a sequence ("items[0].sku", "matrix[1][2]")
- a leading "/" or "$." and empty segments are ignored

Resolution never raises: unknown keys, out-of-range indices and type
mismatches all resolve to ABSENT, which is distinct from an explicit null.
"""

import logging
import re
from typing import Any, List, Optional, Union

from datamapper.exceptions import PathSyntaxError
from datamapper.schema.values import ABSENT

logger = logging.getLogger(__name__)

PathToken = Union[str, int]


class PathResolver:
    """Parses and resolves dotted/bracketed path expressions"""

    # One dot-separated segment: optional key followed by any number of [index]
    SEGMENT_PATTERN = re.compile(r'^([^.\[\]]*)((?:\[\d+\])*)$')
    INDEX_PATTERN = re.compile(r'\[(\d+)\]')

    ROOT_PREFIX = "$."

    @classmethod
    def parse(cls, path: str) -> List[PathToken]:
        """
        Split a path into key (str) and index (int) tokens

        Raises:
            PathSyntaxError: If a segment has unbalanced or non-numeric brackets
        """
        if not isinstance(path, str):
            raise PathSyntaxError(f"Path must be a string, got {type(path).__name__}")

        text = path.strip()
        if text == "$":
            return []
        if text.startswith(cls.ROOT_PREFIX):
            text = text[len(cls.ROOT_PREFIX):]
        text = text.lstrip("/")

        tokens: List[PathToken] = []
        for segment in text.split("."):
            if not segment:
                continue

            match = cls.SEGMENT_PATTERN.match(segment)
            if not match:
                raise PathSyntaxError(f"Malformed path segment '{segment}' in '{path}'")

            key, indices = match.groups()
            if key:
                tokens.append(key)
            tokens.extend(int(i) for i in cls.INDEX_PATTERN.findall(indices))

        return tokens

    @classmethod
    def is_valid(cls, path: str) -> bool:
        try:
            cls.parse(path)
            return True
        except PathSyntaxError:
            return False

    @classmethod
    def resolve(cls, document: Any, path: str) -> Any:
        """
        Resolve a path against a document

        Returns:
            The value found, or ABSENT
        """
        try:
            tokens = cls.parse(path)
        except PathSyntaxError as e:
            logger.debug(f"Unresolvable path {path!r}: {e}")
            return ABSENT

        return cls.resolve_tokens(document, tokens)

    @staticmethod
    def resolve_tokens(document: Any, tokens: List[PathToken]) -> Any:
        current = document

        for token in tokens:
            if isinstance(token, int):
                if not isinstance(current, (list, tuple)) or token >= len(current):
                    return ABSENT
                current = current[token]
            else:
                if not isinstance(current, dict) or token not in current:
                    return ABSENT
                current = current[token]

        return current

    @staticmethod
    def join(*parts: Optional[str]) -> str:
        """
        Concatenate path fragments with "." and drop redundant separators

        Example:
            join("customer.", ".address", "[0]") -> "customer.address.[0]"
        """
        pieces = []
        for part in parts:
            if not part:
                continue
            stripped = part.strip().strip(".")
            if stripped:
                pieces.append(stripped)

        return re.sub(r'\.{2,}', '.', ".".join(pieces))

    @classmethod
    def last_segment(cls, path: str) -> str:
        """Last key of a path, ignoring trailing indices ("a.phones[1]" -> "phones")."""
        try:
            tokens = cls.parse(path)
        except PathSyntaxError:
            return path

        for token in reversed(tokens):
            if isinstance(token, str):
                return token
        return ""
