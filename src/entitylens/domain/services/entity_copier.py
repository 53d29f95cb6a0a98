"""Structural copying of records driven by field metadata."""

import dataclasses
from collections.abc import Mapping
from typing import Any

from sqlalchemy import inspect as sqlalchemy_inspect
from sqlalchemy.orm import InstanceState

from entitylens.core.logging import get_logger
from entitylens.domain.entities.record_snapshot import RecordSnapshot
from entitylens.domain.services.metadata_catalog import MetadataCatalog

logger = get_logger(__name__)


class EntityCopier:
    """Copies records field by field using the catalog's persistent fields.

    Only the identity and the declared persistent fields are copied. Other
    dataclass fields of the copy take their declared defaults. Nested records
    whose type is registered are copied with the same rules, other values are
    shared with the source. Reference cycles are preserved.
    """

    def __init__(self, catalog: MetadataCatalog) -> None:
        self.catalog = catalog

    def copy(self, entity: Any) -> Any:
        """Return a structural copy of a registered record.

        Raises:
            MetadataNotFoundError: If the record's type is not registered.
        """
        return self._copy(entity, {})

    def _copy(self, entity: Any, memo: dict[int, Any]) -> Any:
        if id(entity) in memo:
            return memo[id(entity)]

        fields = self.catalog.persistent_fields(entity)

        if isinstance(entity, RecordSnapshot):
            clone = RecordSnapshot(entity.entity_type, {})
            memo[id(entity)] = clone
            clone._data.update({key: self._copy_value(value, memo) for key, value in entity.items()})
            return clone

        state = sqlalchemy_inspect(entity, raiseerr=False)
        if not isinstance(state, InstanceState):
            state = None
        clone, assign = self._new_instance(entity, state)
        memo[id(entity)] = clone

        names = _identity_names(state) + [f.field_name for f in fields if "." not in f.field_name]
        names = list(dict.fromkeys(names))
        for name in names:
            if hasattr(entity, name):
                assign(clone, name, self._copy_value(getattr(entity, name), memo))
        _fill_defaults(entity, clone, set(names), assign)
        logger.debug("Copied record", entity_type=type(entity).__name__, fields=len(names))
        return clone

    @staticmethod
    def _new_instance(entity: Any, state: InstanceState | None) -> tuple[Any, Any]:
        """Create an empty instance of the entity's class without running ``__init__``."""
        if state is not None:
            # Mapped classes need their instrumentation state
            return state.mapper.class_manager.new_instance(), setattr
        return object.__new__(type(entity)), object.__setattr__

    def _copy_value(self, value: Any, memo: dict[int, Any]) -> Any:
        if value is None or isinstance(value, (str, bytes, int, float, bool)):
            return value
        if self.catalog.is_registered(value):
            return self._copy(value, memo)
        if isinstance(value, list):
            return [self._copy_value(item, memo) for item in value]
        if isinstance(value, tuple):
            return tuple(self._copy_value(item, memo) for item in value)
        if isinstance(value, (set, frozenset)):
            return type(value)(self._copy_value(item, memo) for item in value)
        if isinstance(value, Mapping):
            return {key: self._copy_value(item, memo) for key, item in value.items()}
        return value


def _identity_names(state: InstanceState | None) -> list[str]:
    """Attribute names holding the record identity (the mapper's key for mapped classes)."""
    if state is None:
        return ["id"]
    mapper = state.mapper
    return [mapper.get_property_by_column(column).key for column in mapper.primary_key]


def _fill_defaults(entity: Any, clone: Any, copied: set[str], assign: Any) -> None:
    """Give dataclass fields that were not copied their declared defaults."""
    if not dataclasses.is_dataclass(entity):
        return
    for field in dataclasses.fields(entity):
        if field.name in copied:
            continue
        if field.default is not dataclasses.MISSING:
            assign(clone, field.name, field.default)
        elif field.default_factory is not dataclasses.MISSING:
            assign(clone, field.name, field.default_factory())
        elif hasattr(entity, field.name):
            # Required fields without a default are shared with the source
            assign(clone, field.name, getattr(entity, field.name))
