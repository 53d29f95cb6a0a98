"""Field descriptor entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FieldDescriptor:
    """Metadata about one field of a record type.

    Descriptors are supplied by a metadata catalog. Their order within a type
    defines the order of message fragments and clause predicates.

    Attributes:
        field_name: Dotted path of the field, unique within its type.
        title: Human-readable label used in audit messages.
        is_primary: Whether this field identifies the record in messages.
        is_auditable: Whether changes to this field are audited.
        is_searchable: Whether this field takes part in query by example.
        is_persistent: Whether this field is stored (used by map building and copying).
        is_synchronizable: Whether this field is reported by updated-field checks.
            Defaults to ``is_auditable``.
    """

    field_name: str
    title: str = ""
    is_primary: bool = False
    is_auditable: bool = True
    is_searchable: bool = False
    is_persistent: bool = True
    is_synchronizable: bool | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.field_name:
            raise ValueError("field_name must not be empty")
        if not self.title:
            object.__setattr__(self, "title", self.field_name)
        if self.is_synchronizable is None:
            object.__setattr__(self, "is_synchronizable", self.is_auditable)
