"""Metadata catalog implementations."""

from entitylens.infrastructure.metadata.catalog import (
    EntityMetadata,
    InMemoryMetadataCatalog,
    all_fields,
    to_label,
)
from entitylens.infrastructure.metadata.schemas import CatalogConfig, EntityConfig, FieldConfig

__all__ = [
    "CatalogConfig",
    "EntityConfig",
    "EntityMetadata",
    "FieldConfig",
    "InMemoryMetadataCatalog",
    "all_fields",
    "to_label",
]
