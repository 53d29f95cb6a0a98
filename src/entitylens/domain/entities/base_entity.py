"""Base classes for records handled by the engine."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class BaseEntity:
    """Base class for identified records.

    Attributes:
        id: Identity assigned by the store, None until persisted.
    """

    id: Any = field(default=None, kw_only=True)

    def __str__(self) -> str:
        return f"{type(self).__name__}#{self.id}" if self.id is not None else type(self).__name__


@dataclass(eq=False)
class CodedReference:
    """Lookup-table entry identified by a stable key.

    Coded references compare, hash and render by key only.

    Attributes:
        key: Stable key of the entry.
        value: Display value of the entry.
        category: Lookup category the entry belongs to.
    """

    key: str
    value: str = ""
    category: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CodedReference):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key
