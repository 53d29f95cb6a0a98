"""Audit message entity."""

from dataclasses import dataclass
from enum import Enum


class AuditAction(str, Enum):
    """Operation an audit message describes."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class AuditMessage:
    """Rendered HTML fragment describing a create, update or delete.

    An empty ``text`` is valid: for updates it means that no observable change
    was found and no audit row should be written.
    """

    action: AuditAction
    text: str = ""

    def __str__(self) -> str:
        return self.text

    def __bool__(self) -> bool:
        return bool(self.text)
