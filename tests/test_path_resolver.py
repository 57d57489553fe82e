"""Tests for PathResolver."""
import pytest

from datamapper.exceptions import PathSyntaxError
from datamapper.resolver.path_resolver import PathResolver
from datamapper.schema.values import ABSENT


@pytest.fixture
def document():
    """Sample source document"""
    return {
        "user": {"name": "Ada", "nickname": None, "tags": ["a", "b"]},
        "items": [{"sku": "A1"}, {"sku": "B2"}],
        "matrix": [[1, 2], [3, 4]],
        "0": "zero",
    }


class TestPathParsing:
    """Test path tokenization."""

    def test_parse_dotted(self):
        assert PathResolver.parse("user.name") == ["user", "name"]

    def test_parse_indices(self):
        assert PathResolver.parse("items[1].sku") == ["items", 1, "sku"]
        assert PathResolver.parse("matrix[1][0]") == ["matrix", 1, 0]

    def test_leading_slash_and_empty_segments_ignored(self):
        assert PathResolver.parse("/user..name.") == ["user", "name"]

    def test_root_prefix(self):
        assert PathResolver.parse("$.user.name") == ["user", "name"]
        assert PathResolver.parse("$") == []

    @pytest.mark.parametrize("path", ["items[", "items[x]", "items]0[", "a[-1]", "a[0]b"])
    def test_malformed(self, path):
        with pytest.raises(PathSyntaxError):
            PathResolver.parse(path)

    def test_is_valid(self):
        assert PathResolver.is_valid("a.b[0]")
        assert not PathResolver.is_valid("a.b[")


class TestResolve:
    """Test resolution against documents."""

    def test_resolve_nested(self, document):
        assert PathResolver.resolve(document, "user.name") == "Ada"
        assert PathResolver.resolve(document, "items[1].sku") == "B2"
        assert PathResolver.resolve(document, "matrix[1][0]") == 3

    def test_explicit_null_is_not_absent(self, document):
        assert PathResolver.resolve(document, "user.nickname") is None

    def test_unknown_key(self, document):
        assert PathResolver.resolve(document, "user.email") is ABSENT

    def test_out_of_range(self, document):
        assert PathResolver.resolve(document, "items[5].sku") is ABSENT

    def test_type_mismatches(self, document):
        # indexing a scalar, descending into a sequence, indexing a mapping
        assert PathResolver.resolve(document, "user.name[0]") is ABSENT
        assert PathResolver.resolve(document, "items.sku") is ABSENT
        assert PathResolver.resolve(document, "user[0]") is ABSENT

    def test_numeric_key_on_mapping(self, document):
        assert PathResolver.resolve(document, "0") == "zero"

    def test_malformed_path_resolves_absent(self, document):
        assert PathResolver.resolve(document, "items[") is ABSENT

    def test_empty_path_is_document(self, document):
        assert PathResolver.resolve(document, "") is document


class TestJoin:
    """Test context composition."""

    def test_join_removes_adjacent_separators(self):
        assert PathResolver.join("order.customer.", ".name") == "order.customer.name"
        assert PathResolver.join("a..b", "c") == "a.b.c"

    def test_join_skips_empty_parts(self):
        assert PathResolver.join(None, "name") == "name"
        assert PathResolver.join("", "name", "") == "name"

    def test_last_segment(self):
        assert PathResolver.last_segment("contact.email") == "email"
        assert PathResolver.last_segment("user.phones[1]") == "phones"
        assert PathResolver.last_segment("ssn") == "ssn"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
