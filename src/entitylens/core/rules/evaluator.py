"""Evaluator for predicate expressions.

Variables are read through the nullable path resolver, so a missing property
evaluates to ``None`` instead of failing. The evaluator never writes to the
record and offers no attribute calls beyond the resolver's getters.
"""

from typing import Any, Callable

from entitylens.domain.services.path_resolver import FieldPathResolver, is_collection

from .ast import BinaryOp, FunctionCall, ListLiteral, Literal, Node, UnaryOp, Variable
from .exceptions import ExpressionEvaluationError


def _contains(container: Any, item: Any) -> bool:
    if container is None:
        return False
    return item in container


def _starts_with(value: Any, prefix: Any) -> bool:
    return isinstance(value, str) and isinstance(prefix, str) and value.startswith(prefix)


def _ends_with(value: Any, suffix: Any) -> bool:
    return isinstance(value, str) and isinstance(suffix, str) and value.endswith(suffix)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if is_collection(value):
        return len(value) == 0
    return False


FUNCTIONS: dict[str, tuple[int, Callable[..., bool]]] = {
    "contains": (2, _contains),
    "starts_with": (2, _starts_with),
    "ends_with": (2, _ends_with),
    "is_empty": (1, _is_empty),
}


class Evaluator:
    """Evaluates an AST against a record."""

    def __init__(self, record: Any, resolver: FieldPathResolver | None = None):
        """Initialize the evaluator.

        Args:
            record: The record variables are resolved against.
            resolver: Path resolver, a default one is created if omitted.
        """
        self.record = record
        self.resolver = resolver or FieldPathResolver()

    def evaluate(self, node: Node) -> Any:
        """Evaluate a node."""
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Variable):
            return self.resolver.resolve_nullable(self.record, node.path)
        if isinstance(node, ListLiteral):
            return [self.evaluate(item) for item in node.items]
        if isinstance(node, BinaryOp):
            return self._evaluate_binary(node)
        if isinstance(node, UnaryOp):
            return self._evaluate_unary(node)
        if isinstance(node, FunctionCall):
            return self._evaluate_function(node)
        raise ExpressionEvaluationError(f"Unknown node type: {type(node).__name__}")

    def _evaluate_binary(self, node: BinaryOp) -> Any:
        # Short-circuit logic for AND/OR
        if node.operator == "and":
            return bool(self.evaluate(node.left)) and bool(self.evaluate(node.right))
        if node.operator == "or":
            return bool(self.evaluate(node.left)) or bool(self.evaluate(node.right))

        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        op = node.operator

        if op == "==":
            return left == right
        if op == "!=":
            return left != right
        if op == "in":
            try:
                return right is not None and left in right
            except TypeError:
                return False

        try:
            if op == "<":
                return left < right
            if op == ">":
                return left > right
            if op == "<=":
                return left <= right
            if op == ">=":
                return left >= right
        except TypeError:
            # Incomparable types (e.g. None < 5) never match
            return False

        raise ExpressionEvaluationError(f"Unknown binary operator: {op}")

    def _evaluate_unary(self, node: UnaryOp) -> Any:
        if node.operator == "not":
            return not bool(self.evaluate(node.operand))
        raise ExpressionEvaluationError(f"Unknown unary operator: {node.operator}")

    def _evaluate_function(self, node: FunctionCall) -> Any:
        if node.name not in FUNCTIONS:
            raise ExpressionEvaluationError(f"Unknown function: {node.name}")
        arity, function = FUNCTIONS[node.name]
        if len(node.arguments) != arity:
            raise ExpressionEvaluationError(f"{node.name}() expects {arity} arguments")
        return function(*(self.evaluate(arg) for arg in node.arguments))
