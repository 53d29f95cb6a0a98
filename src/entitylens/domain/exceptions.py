"""Exceptions raised by the EntityLens domain services.

Only :class:`PathResolutionError` from the strict resolver and
:class:`MetadataNotFoundError` ever reach callers. The remaining errors are
raised per field inside the builders, logged, and the field is skipped.
"""

from typing import Any


class EntityLensError(Exception):
    """Base class for all EntityLens errors."""


class PathResolutionError(EntityLensError):
    """Raised when a dotted property path cannot be resolved.

    Args:
        path: The full path that was being resolved.
        cause: The underlying exception, if any.
    """

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        message = f"Failed to retrieve value for {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class MetadataNotFoundError(EntityLensError):
    """Raised when a record type has no registered field metadata."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"No metadata registered for type {type_name}")


class TypeMismatchWarning(EntityLensError, UserWarning):
    """Raised when old and new values of a field have incompatible shapes."""

    def __init__(self, field_name: str, old_shape: str, new_shape: str) -> None:
        self.field_name = field_name
        self.old_shape = old_shape
        self.new_shape = new_shape
        super().__init__(
            f"Unable to compare [{field_name}] due to difference in datatype. "
            f"oldValue is [{old_shape}] and newValue is [{new_shape}]"
        )


class UnsupportedPredicateError(EntityLensError):
    """Raised when a field value cannot be expressed as a clause predicate."""

    def __init__(self, field_name: str, kind: str) -> None:
        self.field_name = field_name
        self.kind = kind
        super().__init__(f"Query by example on {kind} field [{field_name}] is not supported")


class EncodingError(EntityLensError):
    """Raised when a parameter value cannot be percent-encoded."""

    def __init__(self, field_name: str, value: Any, cause: BaseException | None = None) -> None:
        self.field_name = field_name
        self.value = value
        self.cause = cause
        super().__init__(f"Unable to encode value of [{field_name}]: {cause}")
