"""Domain entities for EntityLens.

Entities are plain dataclasses describing records, field metadata and the
transient results produced by the services.
"""

from entitylens.domain.entities.audit_message import AuditAction, AuditMessage
from entitylens.domain.entities.base_entity import BaseEntity, CodedReference
from entitylens.domain.entities.diff_entry import ChangeKind, DiffEntry
from entitylens.domain.entities.field_descriptor import FieldDescriptor
from entitylens.domain.entities.normalized_value import (
    EMPTY,
    Empty,
    NormalizedValue,
    Sequence,
    Text,
)
from entitylens.domain.entities.record_snapshot import RecordSnapshot

__all__ = [
    "AuditAction",
    "AuditMessage",
    "BaseEntity",
    "ChangeKind",
    "CodedReference",
    "DiffEntry",
    "EMPTY",
    "Empty",
    "FieldDescriptor",
    "NormalizedValue",
    "RecordSnapshot",
    "Sequence",
    "Text",
]
