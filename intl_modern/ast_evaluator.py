"""AST-based evaluator for conditional message keys.

A conditional message is a mapping whose keys are boolean expressions over the
message values, e.g. ``{"count == 0": "...", "count > 1": "..."}``. Keys are
parsed with Python's :mod:`ast` and evaluated against the values without ever
calling ``eval``: only comparisons, ``and``/``or``/``not``, literals, tuples of
literals and bare names looked up in the values are understood.
"""

from __future__ import annotations

import ast
import functools
import operator as op
from collections.abc import Callable, Mapping
from typing import Any

from .types import FormatValue

_ORDERING: dict[type[ast.cmpop], Callable[[Any, Any], bool]] = {
    ast.Gt: op.gt,
    ast.GtE: op.ge,
    ast.Lt: op.lt,
    ast.LtE: op.le,
}


class ASTExpressionEvaluator:
    """Evaluator for safe boolean expressions over message values."""

    @staticmethod
    @functools.lru_cache(maxsize=512)
    def parse(expression: str) -> ast.Expression | None:
        """Parse and cache the AST for a boolean expression.

        Args:
            expression: String expression to parse

        Returns:
            Parsed AST Expression or None if invalid syntax
        """
        try:
            return ast.parse(expression.strip(), mode="eval")
        except SyntaxError:
            return None

    @classmethod
    def evaluate(cls, expression: str, values: Mapping[str, Any] | None = None) -> bool:
        """Safely evaluate a boolean expression.

        Unknown names, unsupported syntax and mismatched types all make the
        expression false rather than raising.

        Args:
            expression: Boolean expression string
            values: Names available to the expression

        Returns:
            Boolean result of evaluation
        """
        tree = cls.parse(expression)
        if tree is None:
            return False

        try:
            return cls._evaluate_node(tree.body, values or {})
        except (ValueError, TypeError, KeyError):
            return False

    @classmethod
    def _evaluate_node(cls, node: ast.expr, values: Mapping[str, Any]) -> bool:
        if isinstance(node, ast.BoolOp):
            results = (cls._evaluate_node(value, values) for value in node.values)
            if isinstance(node.op, ast.And):
                return all(results)
            return any(results)

        if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.Not):
            return not cls._evaluate_node(node.operand, values)

        if isinstance(node, ast.Compare):
            return cls._evaluate_compare(node, values)

        if isinstance(node, ast.Constant) and isinstance(node.value, bool):
            return node.value

        if isinstance(node, ast.Name):
            return bool(values[node.id])

        raise ValueError(f"Unsupported node type: {type(node)}")

    @classmethod
    def _evaluate_compare(cls, node: ast.Compare, values: Mapping[str, Any]) -> bool:
        left = cls._evaluate_operand(node.left, values)

        for operator, comparator in zip(node.ops, node.comparators):
            right = cls._evaluate_operand(comparator, values)
            if not cls._apply_comparison(operator, left, right):
                return False
            left = right

        return True

    @classmethod
    def _evaluate_operand(cls, node: ast.expr, values: Mapping[str, Any]) -> Any:
        """Evaluate an operand: a literal, a signed number, a name or a tuple/list of those.

        Raises:
            ValueError: If operand type is unsupported
            KeyError: If a name is not among the values
        """
        if isinstance(node, ast.Constant) and isinstance(node.value, (bool, int, float, str)):
            return node.value

        if isinstance(node, ast.Name):
            return values[node.id]

        if isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.UAdd, ast.USub)):
            operand = cls._evaluate_operand(node.operand, values)
            if isinstance(operand, (int, float)):
                return operand if isinstance(node.op, ast.UAdd) else -operand
            raise ValueError(f"Invalid unary operation on {type(operand)}")

        if isinstance(node, (ast.Tuple, ast.List)):
            return tuple(cls._evaluate_operand(element, values) for element in node.elts)

        raise ValueError(f"Unsupported operand type: {type(node)}")

    @staticmethod
    def _apply_comparison(operator: ast.cmpop, left: Any, right: Any) -> bool:
        if isinstance(operator, ast.Eq):
            return left == right
        if isinstance(operator, ast.NotEq):
            return left != right
        if isinstance(operator, (ast.In, ast.NotIn)):
            if not isinstance(right, (tuple, str)):
                raise TypeError(f"Cannot test membership in {type(right)}")
            return (left in right) == isinstance(operator, ast.In)

        comparator = _ORDERING.get(type(operator))
        if comparator is None:
            raise ValueError(f"Unsupported comparison operator: {type(operator)}")
        return ASTExpressionEvaluator._compare_ordered(comparator, left, right)

    @staticmethod
    def _compare_ordered(
            comparator: Callable[[Any, Any], bool], left: FormatValue, right: FormatValue
    ) -> bool:
        if isinstance(left, str) and isinstance(right, str):
            return comparator(left, right)

        if isinstance(left, (int, float)) and isinstance(right, (int, float)):
            return comparator(float(left), float(right))

        raise TypeError(f"Cannot compare {type(left)} with {type(right)}")


def eval_key(key: str, values: Mapping[str, Any] | None = None) -> bool:
    """Return whether the conditional message key ``key`` holds for ``values``."""
    return ASTExpressionEvaluator.evaluate(key, values)
