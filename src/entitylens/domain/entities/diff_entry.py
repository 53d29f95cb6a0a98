"""Diff entry entity."""

from dataclasses import dataclass, field
from enum import Enum

from entitylens.domain.entities.field_descriptor import FieldDescriptor
from entitylens.domain.entities.normalized_value import NormalizedValue


class ChangeKind(str, Enum):
    """Classification of one field between two snapshots.

    ADDED and REMOVED only apply to collection fields.
    """

    UNCHANGED = "unchanged"
    CHANGED = "changed"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class DiffEntry:
    """One field's change classification.

    Attributes:
        field: Descriptor of the compared field.
        kind: How the field changed.
        old_value: Normalized value from the old snapshot.
        new_value: Normalized value from the new snapshot.
        items: Elements added or removed, for ADDED/REMOVED entries.
    """

    field: FieldDescriptor
    kind: ChangeKind
    old_value: NormalizedValue
    new_value: NormalizedValue
    items: tuple[NormalizedValue, ...] = field(default_factory=tuple)

    @property
    def is_change(self) -> bool:
        return self.kind is not ChangeKind.UNCHANGED
