"""Pydantic schemas for declarative catalog configuration."""

from pydantic import BaseModel, Field, field_validator, model_validator

from entitylens.domain.entities.field_descriptor import FieldDescriptor


class FieldConfig(BaseModel):
    """Declaration of one field of a record type."""

    name: str = Field(
        ...,
        min_length=1,
        description="Field name or dotted path",
    )
    title: str | None = Field(
        default=None,
        description="Label used in audit messages (defaults to a label derived from the name)",
    )
    primary: bool = Field(default=False, description="Whether the field identifies the record")
    auditable: bool = Field(default=True, description="Whether changes are audited")
    searchable: bool = Field(default=False, description="Whether the field filters queries by example")
    persistent: bool = Field(default=True, description="Whether the field is stored")
    synchronizable: bool | None = Field(
        default=None,
        description="Whether the field is reported as updated (defaults to auditable)",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject paths with empty segments."""
        if any(not part.strip() for part in v.split(".")):
            raise ValueError(f"Invalid field path: {v!r}")
        return v.strip()

    def to_descriptor(self, title: str) -> FieldDescriptor:
        """Convert to a field descriptor using ``title`` when none is declared."""
        return FieldDescriptor(
            field_name=self.name,
            title=self.title or title,
            is_primary=self.primary,
            is_auditable=self.auditable,
            is_searchable=self.searchable,
            is_persistent=self.persistent,
            is_synchronizable=self.synchronizable,
        )


class EntityConfig(BaseModel):
    """Declaration of one record type."""

    name: str = Field(..., min_length=1, description="Type name records are registered under")
    class_path: str | None = Field(
        default=None,
        description="Importable class as 'package.module:ClassName'",
    )
    readable_name: str | None = Field(default=None, description="Name used in audit messages")
    auditable: bool = Field(default=True, description="Whether create messages are produced")
    fields: list[FieldConfig] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_fields(self) -> "EntityConfig":
        """Field names must be unique and at most one field may be primary."""
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate fields in {self.name}: {', '.join(duplicates)}")
        if sum(1 for f in self.fields if f.primary) > 1:
            raise ValueError(f"More than one primary field declared for {self.name}")
        return self


class CatalogConfig(BaseModel):
    """Declarative configuration of a whole catalog."""

    entities: list[EntityConfig] = Field(default_factory=list)
