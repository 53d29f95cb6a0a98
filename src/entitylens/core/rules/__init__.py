"""Predicate expression API.

Expressions are parsed once per distinct text and cached, so evaluating the
same expression against many records only pays for evaluation.
"""

from functools import lru_cache
from typing import Any

from entitylens.core.config import get_settings
from entitylens.core.logging import get_logger

from .ast import Node
from .evaluator import Evaluator
from .exceptions import ExpressionError, ExpressionEvaluationError, ExpressionSyntaxError
from .lexer import Lexer
from .parser import Parser

logger = get_logger(__name__)


@lru_cache(maxsize=get_settings().expression_cache_size)
def parse_expression(expression: str) -> Node:
    """Parse an expression string into an AST.

    Raises:
        ExpressionSyntaxError: If the expression is malformed.
    """
    return Parser(Lexer(expression)).parse()


def evaluate_expression(record: Any, expression: str | None) -> bool:
    """Evaluate a boolean expression against a record.

    Blank expressions and expressions that fail to parse or evaluate are
    false.

    Examples:
        >>> evaluate_expression({"age": 20, "status": {"key": "ACTIVE"}},
        ...                     "age >= 18 and status.key == 'ACTIVE'")
        True
    """
    if expression is None or not expression.strip():
        return False
    try:
        return bool(Evaluator(record).evaluate(parse_expression(expression)))
    except ExpressionError as e:
        logger.debug(
            "Failed to evaluate expression",
            expression=expression,
            record_type=type(record).__name__,
            error=str(e),
        )
        return False


__all__ = [
    "parse_expression",
    "evaluate_expression",
    "Evaluator",
    "Node",
    "ExpressionError",
    "ExpressionSyntaxError",
    "ExpressionEvaluationError",
]
