"""Metadata catalog interface consumed by the domain services.

The services never populate or mutate a catalog. How the descriptors are built
(static registration, declarative configuration, mapper inspection) is the
concern of the implementation, see
:class:`entitylens.infrastructure.metadata.InMemoryMetadataCatalog`.
"""

from typing import Any, Protocol, runtime_checkable

from entitylens.domain.entities.field_descriptor import FieldDescriptor


@runtime_checkable
class MetadataCatalog(Protocol):
    """Supplies ordered field descriptors per record type.

    Every method accepts a class, an instance, or a ``RecordSnapshot`` and
    raises ``MetadataNotFoundError`` for unknown types.
    """

    def primary_field(self, entity_type: Any) -> FieldDescriptor: ...

    def auditable_fields(self, entity_type: Any) -> list[FieldDescriptor]: ...

    def searchable_fields(self, entity_type: Any) -> list[FieldDescriptor]: ...

    def persistent_fields(self, entity_type: Any) -> list[FieldDescriptor]: ...

    def synchronizable_fields(self, entity_type: Any) -> list[FieldDescriptor]: ...

    def is_auditable(self, entity_type: Any) -> bool: ...

    def is_registered(self, entity_type: Any) -> bool: ...

    def readable_name(self, entity_type: Any) -> str: ...
