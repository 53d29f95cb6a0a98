"""Exceptions for predicate expression parsing and evaluation."""

from entitylens.domain.exceptions import EntityLensError


class ExpressionError(EntityLensError):
    """Base class for all expression errors."""


class ExpressionSyntaxError(ExpressionError):
    """Raised when expression syntax is invalid."""

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        super().__init__(f"{message} at position {position}" if position is not None else message)


class ExpressionEvaluationError(ExpressionError):
    """Raised when an expression cannot be evaluated."""
