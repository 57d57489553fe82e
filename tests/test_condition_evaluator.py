"""Tests for ConditionEvaluator."""
import pytest

from datamapper.condition.evaluator import OPERAND_ABSENT, ConditionEvaluator
from datamapper.schema.models import Condition, ConditionOperator, ContextDef


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def document():
    """Sample source document"""
    return {
        "type": "user",
        "age": 42,
        "score": "9",
        "code": "AB-123",
        "customer": {"tier": "Gold", "country": "PT"},
        "nothing": None,
    }


@pytest.fixture
def evaluator():
    """Evaluator with a 'client' context"""
    return ConditionEvaluator({"client": ContextDef("client", "customer")})


def cond(op, left, right=None, **kwargs):
    return Condition(op=ConditionOperator(op), left=left, right=right, **kwargs)


# ============================================================================
# TEST: ConditionEvaluator
# ============================================================================


class TestEquality:
    """Tests for equals/notEquals"""

    def test_no_condition_passes(self, evaluator, document):
        assert evaluator.evaluate(None, document).passed

    def test_equals_fails_with_reason(self, evaluator, document):
        result = evaluator.evaluate(cond("equals", "$.type", "admin"), document)

        assert not result.passed
        assert result.reason == "condition failed: $.type equals admin"

    def test_equals_passes(self, evaluator, document):
        assert evaluator.evaluate(cond("equals", "$.type", "user"), document).passed

    def test_equals_on_rendered_strings(self, evaluator, document):
        assert evaluator.evaluate(cond("equals", "$.age", "42"), document).passed

    def test_equals_case_sensitive_by_default(self, evaluator, document):
        assert not evaluator.evaluate(cond("equals", "$.type", "USER"), document).passed
        assert evaluator.evaluate(cond("equals", "$.type", "USER", ignore_case=True), document).passed

    def test_not_equals(self, evaluator, document):
        assert evaluator.evaluate(cond("notEquals", "$.type", "admin"), document).passed

    def test_right_operand_path(self, evaluator, document):
        assert evaluator.evaluate(cond("equals", "$.score", "$.score"), document).passed

    def test_null_value(self, evaluator, document):
        assert evaluator.evaluate(cond("equals", "$.nothing", None), document).passed


class TestMembership:
    """Tests for in/notIn"""

    def test_in(self, evaluator, document):
        assert evaluator.evaluate(cond("in", "$.type", values=["user", "admin"]), document).passed

    def test_not_in(self, evaluator, document):
        assert evaluator.evaluate(cond("notIn", "$.type", values=["admin", "root"]), document).passed
        assert not evaluator.evaluate(cond("notIn", "$.type", values=["user"]), document).passed

    def test_in_ignore_case(self, evaluator, document):
        condition = cond("in", "client.tier", values=["gold"], ignore_case=True)
        assert evaluator.evaluate(condition, document).passed

    def test_in_list_as_right(self, evaluator, document):
        assert evaluator.evaluate(cond("in", "$.age", [41, 42]), document).passed


class TestExistence:
    """Tests for exists/notExists"""

    def test_exists(self, evaluator, document):
        assert evaluator.evaluate(cond("exists", "$.type"), document).passed
        assert evaluator.evaluate(cond("exists", "$.nothing"), document).passed

    def test_exists_fails_on_absent(self, evaluator, document):
        result = evaluator.evaluate(cond("exists", "$.missing"), document)
        assert not result.passed
        assert result.reason == "condition failed: $.missing exists"

    def test_not_exists(self, evaluator, document):
        assert evaluator.evaluate(cond("notExists", "$.missing"), document).passed
        assert not evaluator.evaluate(cond("notExists", "$.type"), document).passed


class TestAbsentOperands:
    """Absent operands fail every operator except exists/notExists"""

    @pytest.mark.parametrize("op", ["equals", "notEquals", "matches", "gt", "lte"])
    def test_absent_left(self, evaluator, document, op):
        result = evaluator.evaluate(cond(op, "$.missing", "x"), document)
        assert not result.passed
        assert result.reason == OPERAND_ABSENT

    def test_absent_left_membership(self, evaluator, document):
        result = evaluator.evaluate(cond("notIn", "$.missing", values=["x"]), document)
        assert result.reason == OPERAND_ABSENT

    def test_absent_right(self, evaluator, document):
        result = evaluator.evaluate(cond("equals", "$.type", "$.missing"), document)
        assert result.reason == OPERAND_ABSENT


class TestMatches:
    """Tests for regex matching"""

    def test_matches_unanchored(self, evaluator, document):
        assert evaluator.evaluate(cond("matches", "$.code", r"\d+"), document).passed

    def test_matches_anchored_as_written(self, evaluator, document):
        assert not evaluator.evaluate(cond("matches", "$.code", r"^\d+$"), document).passed
        assert evaluator.evaluate(cond("matches", "$.code", r"^[A-Z]{2}-\d{3}$"), document).passed

    def test_matches_ignore_case(self, evaluator, document):
        assert evaluator.evaluate(cond("matches", "$.code", "^ab", ignore_case=True), document).passed

    def test_pattern_from_path(self, evaluator):
        data = {"name": "Ada", "re": "^A"}
        assert evaluator.evaluate(cond("matches", "$.name", "$.re"), data).passed

        data["re"] = "^B"
        assert not evaluator.evaluate(cond("matches", "$.name", "$.re"), data).passed

    def test_invalid_pattern_from_path_fails(self, evaluator):
        result = evaluator.evaluate(cond("matches", "$.name", "$.re"), {"name": "Ada", "re": "(["})

        assert not result.passed
        assert result.reason.startswith("invalid pattern")


class TestOrdering:
    """Tests for gt/gte/lt/lte"""

    def test_numeric(self, evaluator, document):
        assert evaluator.evaluate(cond("gt", "$.age", 18), document).passed
        assert evaluator.evaluate(cond("gte", "$.age", 42), document).passed
        assert not evaluator.evaluate(cond("lt", "$.age", 42), document).passed
        assert evaluator.evaluate(cond("lte", "$.age", 42.0), document).passed

    def test_numeric_strings_compare_numerically(self, evaluator, document):
        # "9" > "10" lexicographically, but 9 < 10
        assert evaluator.evaluate(cond("lt", "$.score", "10"), document).passed

    def test_lexicographic_fallback(self, evaluator, document):
        # one numeric, one non-numeric operand
        assert evaluator.evaluate(cond("lt", "$.age", "abc"), document).passed
        assert evaluator.evaluate(cond("gt", "$.type", "admin"), document).passed

    def test_non_finite_and_separated_strings_are_not_numeric(self, evaluator, document):
        # compared as text: "nan" > "5" and "1_000" < "5"
        assert evaluator.evaluate(cond("gt", "nan", 5), document).passed
        assert evaluator.evaluate(cond("lt", "1_000", 5), document).passed
        assert evaluator.evaluate(cond("gt", "inf", "5"), document).passed


class TestOperands:
    """Tests for operand resolution"""

    def test_context_operand(self, evaluator, document):
        assert evaluator.evaluate(cond("equals", "client.country", "PT"), document).passed

    def test_literal_left(self, evaluator, document):
        assert evaluator.evaluate(cond("equals", "user", "$.type"), document).passed

    def test_is_path_operand(self, evaluator):
        assert evaluator.is_path_operand("$.a")
        assert evaluator.is_path_operand("client.tier")
        assert not evaluator.is_path_operand("customer.tier")
        assert not evaluator.is_path_operand(42)

    def test_scope_and_root(self, evaluator, document):
        item = {"sku": "A1"}
        condition = cond("equals", "$.sku", "A1")
        assert evaluator.evaluate(condition, item, document).passed

        by_context = cond("equals", "client.tier", "Gold")
        assert evaluator.evaluate(by_context, item, document).passed


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
