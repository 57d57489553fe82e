"""
Condition Evaluator - Evaluates rule guards against a source context

Operands:
- "$.path" resolves against the current scope (the document, or the
  collection item being expanded)
- "<context>.path" resolves against the document under that context's base path
- anything else is a literal
"""

import logging
import operator
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from datamapper.resolver.path_resolver import PathResolver
from datamapper.schema.models import Condition, ConditionOperator, ContextDef
from datamapper.schema.values import ABSENT, to_number, to_text

logger = logging.getLogger(__name__)

OPERAND_ABSENT = "operand absent"


@dataclass(frozen=True)
class ConditionResult:
    """Outcome of a guard evaluation"""

    passed: bool
    reason: Optional[str] = None


PASSED = ConditionResult(True)


class ConditionEvaluator:
    """Evaluates Condition objects"""

    ORDERING: Dict[ConditionOperator, Callable[[Any, Any], bool]] = {
        ConditionOperator.GT: operator.gt,
        ConditionOperator.GTE: operator.ge,
        ConditionOperator.LT: operator.lt,
        ConditionOperator.LTE: operator.le,
    }

    def __init__(self, contexts: Optional[Dict[str, ContextDef]] = None):
        """
        Initialize ConditionEvaluator

        Args:
            contexts: Defined contexts, used to recognise context-relative operands
        """
        self.contexts = contexts or {}

    def evaluate(
        self,
        condition: Optional[Condition],
        scope: Any,
        root: Any = ABSENT,
    ) -> ConditionResult:
        """
        Evaluate a condition

        Args:
            condition: Guard to evaluate; None always passes
            scope: Value "$." operands resolve against
            root: Document context operands resolve against (defaults to scope)

        Returns:
            ConditionResult with the failure reason when not passed
        """
        if condition is None:
            return PASSED

        if root is ABSENT:
            root = scope

        op = condition.op
        left = self.resolve_operand(condition.left, scope, root)

        if op == ConditionOperator.EXISTS:
            return self._result(left is not ABSENT, condition)
        if op == ConditionOperator.NOT_EXISTS:
            return self._result(left is ABSENT, condition)

        if left is ABSENT:
            return ConditionResult(False, OPERAND_ABSENT)

        if op in (ConditionOperator.IN, ConditionOperator.NOT_IN):
            members = condition.values
            if members is None and isinstance(condition.right, (list, tuple)):
                members = condition.right
            found = self._contains(members or [], left, condition.ignore_case)
            return self._result(found if op == ConditionOperator.IN else not found, condition)

        right = self.resolve_operand(condition.right, scope, root)
        if right is ABSENT:
            return ConditionResult(False, OPERAND_ABSENT)

        if op == ConditionOperator.EQUALS:
            passed = self._same(left, right, condition.ignore_case)
        elif op == ConditionOperator.NOT_EQUALS:
            passed = not self._same(left, right, condition.ignore_case)
        elif op == ConditionOperator.MATCHES:
            try:
                passed = self._matches(condition, left, right)
            except re.error as e:
                return ConditionResult(False, f"invalid pattern: {e}")
        else:
            passed = self._compare(op, left, right, condition.ignore_case)

        return self._result(passed, condition)

    def is_path_operand(self, operand: Any) -> bool:
        if not isinstance(operand, str):
            return False
        if operand == "$" or operand.startswith(PathResolver.ROOT_PREFIX):
            return True
        head = operand.split(".", 1)[0].split("[", 1)[0]
        return head in self.contexts

    def resolve_operand(self, operand: Any, scope: Any, root: Any) -> Any:
        """Resolve a path operand, or return a literal unchanged."""
        if not self.is_path_operand(operand):
            return operand

        if operand == "$" or operand.startswith(PathResolver.ROOT_PREFIX):
            return PathResolver.resolve(scope, operand)

        head, _, rest = operand.partition(".")
        context = self.contexts[head.split("[", 1)[0]]
        path = PathResolver.join(context.base_path, head[len(context.name):], rest)
        return PathResolver.resolve(root, path)

    @staticmethod
    def _text(value: Any, ignore_case: bool) -> str:
        text = to_text(value)
        if text is None:
            text = "null"
        return text.casefold() if ignore_case else text

    def _same(self, left: Any, right: Any, ignore_case: bool) -> bool:
        return self._text(left, ignore_case) == self._text(right, ignore_case)

    def _contains(self, members, value: Any, ignore_case: bool) -> bool:
        needle = self._text(value, ignore_case)
        return any(self._text(member, ignore_case) == needle for member in members)

    def _matches(self, condition: Condition, left: Any, right: Any) -> bool:
        pattern = condition.pattern
        if pattern is None:
            flags = re.IGNORECASE if condition.ignore_case else 0
            pattern = re.compile(self._text(right, False), flags)
        return pattern.search(self._text(left, False)) is not None

    def _compare(self, op: ConditionOperator, left: Any, right: Any, ignore_case: bool) -> bool:
        compare = self.ORDERING[op]
        left_number, right_number = to_number(left), to_number(right)

        if left_number is not None and right_number is not None:
            return compare(left_number, right_number)

        # lexicographic fallback
        return compare(self._text(left, ignore_case), self._text(right, ignore_case))

    @staticmethod
    def _result(passed: bool, condition: Condition) -> ConditionResult:
        if passed:
            return PASSED

        if condition.op in (ConditionOperator.IN, ConditionOperator.NOT_IN):
            expected = condition.values if condition.values is not None else condition.right
        else:
            expected = condition.right

        if expected is None and condition.op in (ConditionOperator.EXISTS, ConditionOperator.NOT_EXISTS):
            reason = f"condition failed: {condition.left} {condition.op.value}"
        else:
            reason = f"condition failed: {condition.left} {condition.op.value} {to_text(expected)}"

        logger.debug(reason)
        return ConditionResult(False, reason)
