"""In-memory metadata catalog.

Record types are registered once at start-up, either statically with
:meth:`InMemoryMetadataCatalog.register`, from a SQLAlchemy mapper with
:meth:`InMemoryMetadataCatalog.register_mapped_class`, or declaratively with
:meth:`InMemoryMetadataCatalog.load_config`. Lookups afterwards are read-only.
"""

import dataclasses
import importlib
import re
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect as sqlalchemy_inspect
from sqlalchemy.orm import ColumnProperty, Mapper, RelationshipProperty

from entitylens.core.logging import get_logger
from entitylens.domain.entities.base_entity import BaseEntity
from entitylens.domain.entities.field_descriptor import FieldDescriptor
from entitylens.domain.entities.record_snapshot import RecordSnapshot
from entitylens.domain.exceptions import MetadataNotFoundError
from entitylens.infrastructure.metadata.schemas import CatalogConfig

logger = get_logger(__name__)

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|_+")


def to_label(name: str) -> str:
    """Derive a human-readable label from a field or class name.

    Examples:
        >>> to_label("firstName")
        'First Name'
        >>> to_label("join_date")
        'Join Date'
    """
    last = name.rsplit(".", 1)[-1]
    words = [w for w in _WORD_BOUNDARY.split(last) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def all_fields(cls: type, include_parent: bool = True) -> list[dataclasses.Field]:
    """Return the dataclass fields of a class.

    Args:
        cls: A dataclass.
        include_parent: Include fields inherited from parent record classes.

    Returns:
        list: Parent fields first, in declaration order.
    """
    if not dataclasses.is_dataclass(cls):
        return []
    fields = list(dataclasses.fields(cls))
    if include_parent:
        return fields
    inherited = {f.name for base in cls.__mro__[1:] if dataclasses.is_dataclass(base) for f in dataclasses.fields(base)}
    return [f for f in fields if f.name not in inherited]


@dataclass(frozen=True)
class EntityMetadata:
    """Registered metadata of one record type."""

    name: str
    readable_name: str
    auditable: bool
    fields: tuple[FieldDescriptor, ...]

    @property
    def primary(self) -> FieldDescriptor:
        return next(f for f in self.fields if f.is_primary)


class InMemoryMetadataCatalog:
    """Thread-safe registry of field descriptors per record type.

    Types are keyed by class (subclasses inherit the closest registered
    ancestor) and by name, which is how ``RecordSnapshot`` records are found.

    Example:
        catalog = InMemoryMetadataCatalog()
        catalog.register(
            Ninja,
            [
                FieldDescriptor("firstName", "First Name", is_primary=True, is_searchable=True),
                FieldDescriptor("email", "Email Address", is_searchable=True),
                FieldDescriptor("tags", "Tags", is_auditable=False),
            ],
        )
        catalog.auditable_fields(ninja)  # [firstName, email]
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_class: dict[type, EntityMetadata] = {}
        self._by_name: dict[str, EntityMetadata] = {}

    def register(
        self,
        entity_type: type | str,
        fields: Iterable[FieldDescriptor | str] | None = None,
        readable_name: str | None = None,
        auditable: bool = True,
        exclude: Iterable[str] = (),
    ) -> EntityMetadata:
        """Register field metadata for a record type.

        Args:
            entity_type: Record class, or a type name for snapshots.
            fields: Ordered descriptors or plain field names. When omitted the
                dataclass fields of the class are used (``id`` excluded).
            readable_name: Name used in audit messages.
            auditable: Whether create messages are produced for this type.
            exclude: Field names to leave out of auditing.

        Returns:
            EntityMetadata: The registered metadata.

        Raises:
            ValueError: If field names repeat, several fields are primary or
                no field can be derived.
        """
        name = entity_type if isinstance(entity_type, str) else entity_type.__name__
        if fields is None:
            if isinstance(entity_type, str):
                raise ValueError(f"Fields must be given for type name {name}")
            fields = [f.name for f in all_fields(entity_type) if f.name != "id"]

        excluded = set(exclude)
        descriptors = []
        for field in fields:
            if isinstance(field, str):
                field = FieldDescriptor(field_name=field, title=to_label(field))
            if field.field_name in excluded:
                field = dataclasses.replace(field, is_auditable=False)
            descriptors.append(field)

        metadata = EntityMetadata(
            name=name,
            readable_name=readable_name or to_label(name),
            auditable=auditable,
            fields=self._validated(name, descriptors),
        )

        with self._lock:
            if not isinstance(entity_type, str):
                self._by_class[entity_type] = metadata
            self._by_name[name] = metadata
        logger.debug("Registered record type", entity_type=name, fields=len(metadata.fields))
        return metadata

    def register_mapped_class(
        self,
        mapped_class: type,
        primary: str | None = None,
        titles: Mapping[str, str] | None = None,
        searchable: Iterable[str] = (),
        exclude: Iterable[str] = (),
        readable_name: str | None = None,
        auditable: bool = True,
    ) -> EntityMetadata:
        """Register a SQLAlchemy-mapped class from its mapper.

        Column and relationship attributes become fields in mapper order.
        Primary key columns are the record identity and are not fields.

        Args:
            mapped_class: A declaratively mapped class.
            primary: Field rendered first in audit messages. Defaults to the
                first non-key column.
            titles: Labels per attribute name.
            searchable: Attribute names that filter queries by example.
            exclude: Attribute names left out of auditing.
            readable_name: Name used in audit messages.
            auditable: Whether create messages are produced for this type.
        """
        mapper: Mapper = sqlalchemy_inspect(mapped_class)
        titles = dict(titles or {})
        searchable = set(searchable)
        key_columns = set(mapper.primary_key)

        names = []
        for attr in mapper.attrs:
            if isinstance(attr, ColumnProperty):
                if any(column in key_columns for column in attr.columns):
                    continue
                names.append(attr.key)
            elif isinstance(attr, RelationshipProperty):
                names.append(attr.key)

        if not names:
            raise ValueError(f"{mapped_class.__name__} has no mapped fields")
        primary = primary or names[0]

        descriptors = [
            FieldDescriptor(
                field_name=name,
                title=titles.get(name) or to_label(name),
                is_primary=name == primary,
                is_searchable=name in searchable,
            )
            for name in names
        ]
        return self.register(
            mapped_class,
            descriptors,
            readable_name=readable_name,
            auditable=auditable,
            exclude=exclude,
        )

    def load_config(
        self,
        config: CatalogConfig | Mapping[str, Any],
        types: Mapping[str, type] | None = None,
    ) -> list[EntityMetadata]:
        """Register every type declared in a catalog configuration.

        Args:
            config: A ``CatalogConfig`` or data validated into one.
            types: Classes per declared type name. Types that are neither
                listed here nor given a ``class_path`` are registered by name.

        Returns:
            list[EntityMetadata]: The registered metadata, in declaration order.
        """
        if not isinstance(config, CatalogConfig):
            config = CatalogConfig.model_validate(config)
        types = dict(types or {})

        registered = []
        for entity in config.entities:
            target: type | str = types.get(entity.name) or entity.name
            if entity.class_path and entity.name not in types:
                target = _import_class(entity.class_path)
            descriptors = [f.to_descriptor(to_label(f.name)) for f in entity.fields]
            metadata = self.register(
                target,
                descriptors,
                readable_name=entity.readable_name,
                auditable=entity.auditable,
            )
            if not isinstance(target, str) and target.__name__ != entity.name:
                with self._lock:
                    self._by_name[entity.name] = metadata
            registered.append(metadata)
        logger.info("Loaded catalog configuration", types=len(registered))
        return registered

    def metadata(self, entity_type: Any) -> EntityMetadata:
        """Return the metadata registered for a class, instance, snapshot or name.

        Raises:
            MetadataNotFoundError: If the type is not registered.
        """
        metadata = self._lookup(entity_type)
        if metadata is None:
            raise MetadataNotFoundError(_type_name(entity_type))
        return metadata

    def is_registered(self, entity_type: Any) -> bool:
        return self._lookup(entity_type) is not None

    def primary_field(self, entity_type: Any) -> FieldDescriptor:
        return self.metadata(entity_type).primary

    def auditable_fields(self, entity_type: Any) -> list[FieldDescriptor]:
        return [f for f in self.metadata(entity_type).fields if f.is_auditable]

    def searchable_fields(self, entity_type: Any) -> list[FieldDescriptor]:
        return [f for f in self.metadata(entity_type).fields if f.is_searchable]

    def persistent_fields(self, entity_type: Any) -> list[FieldDescriptor]:
        return [f for f in self.metadata(entity_type).fields if f.is_persistent]

    def synchronizable_fields(self, entity_type: Any) -> list[FieldDescriptor]:
        return [f for f in self.metadata(entity_type).fields if f.is_synchronizable]

    def is_auditable(self, entity_type: Any) -> bool:
        return self.metadata(entity_type).auditable

    def readable_name(self, entity_type: Any) -> str:
        return self.metadata(entity_type).readable_name

    def _lookup(self, entity_type: Any) -> EntityMetadata | None:
        if isinstance(entity_type, RecordSnapshot):
            return self._by_name.get(entity_type.entity_type)
        if isinstance(entity_type, str):
            return self._by_name.get(entity_type)
        cls = entity_type if isinstance(entity_type, type) else type(entity_type)
        for klass in cls.__mro__:
            if klass in (BaseEntity, object):
                break
            metadata = self._by_class.get(klass)
            if metadata is not None:
                return metadata
        return None

    @staticmethod
    def _validated(name: str, descriptors: list[FieldDescriptor]) -> tuple[FieldDescriptor, ...]:
        if not descriptors:
            raise ValueError(f"No fields declared for {name}")
        seen = set()
        for descriptor in descriptors:
            if descriptor.field_name in seen:
                raise ValueError(f"Duplicate field {descriptor.field_name} in {name}")
            seen.add(descriptor.field_name)

        primaries = [d for d in descriptors if d.is_primary]
        if len(primaries) > 1:
            raise ValueError(f"More than one primary field declared for {name}")
        if not primaries:
            # The first declared field identifies the record
            descriptors = [dataclasses.replace(descriptors[0], is_primary=True)] + descriptors[1:]
        return tuple(descriptors)


def _type_name(entity_type: Any) -> str:
    if isinstance(entity_type, RecordSnapshot):
        return entity_type.entity_type
    if isinstance(entity_type, str):
        return entity_type
    cls = entity_type if isinstance(entity_type, type) else type(entity_type)
    return cls.__name__


def _import_class(class_path: str) -> type:
    module_name, _, class_name = class_path.partition(":")
    if not class_name:
        raise ValueError(f"class_path must look like 'package.module:ClassName', got {class_path!r}")
    return getattr(importlib.import_module(module_name), class_name)
