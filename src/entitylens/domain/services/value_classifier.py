"""Classification of raw field values.

Raw values enter the engine through :func:`classify`, which tags each value
with a :class:`ValueKind` exactly once. The normalizer, the query builder and
parameter substitution branch on the tag instead of re-testing types.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from enum import Enum
from numbers import Number
from typing import Any

from sqlalchemy import inspect as sqlalchemy_inspect
from sqlalchemy.orm import InstanceState

from entitylens.domain.entities.base_entity import BaseEntity, CodedReference
from entitylens.domain.entities.record_snapshot import RecordSnapshot
from entitylens.domain.services.path_resolver import is_sequence_like


class ValueKind(str, Enum):
    """Kinds of raw field values."""

    ABSENT = "absent"
    TEXT = "text"
    BOOLEAN = "boolean"
    NUMBER = "number"
    TEMPORAL = "temporal"
    CODED = "coded"
    ENTITY = "entity"
    TYPE = "type"
    COLLECTION = "collection"
    MAPPING = "mapping"
    OTHER = "other"


@dataclass(frozen=True)
class ClassifiedValue:
    """A raw value tagged with its kind.

    Attributes:
        kind: The value's kind.
        raw: The original value.
    """

    kind: ValueKind
    raw: Any

    @property
    def identity(self) -> Any:
        """Identity of an ENTITY value, None when unassigned or not an entity."""
        if self.kind is not ValueKind.ENTITY:
            return None
        return entity_identity(self.raw)

    @property
    def text(self) -> str:
        """Canonical string form of the value."""
        if self.kind is ValueKind.ABSENT:
            return ""
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.raw else "false"
        if self.kind is ValueKind.CODED:
            return self.raw.key or ""
        if self.kind is ValueKind.TYPE:
            return f"{self.raw.__module__}.{self.raw.__qualname__}"
        if self.kind is ValueKind.ENTITY and not _has_string_form(type(self.raw)):
            # Mapped classes without their own string form render like BaseEntity
            identity = self.identity
            name = type(self.raw).__name__
            return f"{name}#{identity}" if identity is not None else name
        return str(self.raw)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


def _has_string_form(cls: type) -> bool:
    return cls.__str__ is not object.__str__ or cls.__repr__ is not object.__repr__


def _mapped_state(value: Any) -> InstanceState | None:
    if isinstance(value, type):
        return None
    state = sqlalchemy_inspect(value, raiseerr=False)
    return state if isinstance(state, InstanceState) else None


def entity_identity(value: Any) -> Any:
    """Return the identity of a record, or None when it has none yet.

    SQLAlchemy-mapped instances use their mapper's primary key (the first
    column for composite keys, the tuple when several are set).
    """
    state = _mapped_state(value)
    if state is not None:
        mapper = state.mapper
        values = [state.dict.get(mapper.get_property_by_column(col).key) for col in mapper.primary_key]
        present = [v for v in values if v is not None]
        if not present:
            return None
        return present[0] if len(values) == 1 else tuple(values)
    return getattr(value, "id", None)


def classify(value: Any) -> ClassifiedValue:
    """Tag a raw value with its kind.

    Args:
        value: Any raw field value.

    Returns:
        ClassifiedValue: The value and its kind.
    """
    if value is None:
        kind = ValueKind.ABSENT
    elif isinstance(value, str):
        kind = ValueKind.TEXT
    elif isinstance(value, bool):
        kind = ValueKind.BOOLEAN
    elif isinstance(value, (int, float, Decimal)) or (
        isinstance(value, Number) and not isinstance(value, complex)
    ):
        kind = ValueKind.NUMBER
    elif isinstance(value, (date, time)):
        kind = ValueKind.TEMPORAL
    elif isinstance(value, CodedReference):
        kind = ValueKind.CODED
    elif isinstance(value, (BaseEntity, RecordSnapshot)) or _mapped_state(value) is not None:
        kind = ValueKind.ENTITY
    elif isinstance(value, type):
        kind = ValueKind.TYPE
    elif isinstance(value, Mapping):
        kind = ValueKind.MAPPING
    elif is_sequence_like(value):
        kind = ValueKind.COLLECTION
    else:
        kind = ValueKind.OTHER
    return ClassifiedValue(kind=kind, raw=value)
