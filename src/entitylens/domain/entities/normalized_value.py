"""Canonical comparison and rendering forms of field values.

A normalized value is one of three shapes: :class:`Empty`, :class:`Text` or
:class:`Sequence`. Diffing compares these forms only, never raw values.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Empty:
    """Absent value, empty collection or blank marker."""

    shape = "empty"

    @property
    def is_empty(self) -> bool:
        return True

    def render(self) -> str:
        return ""


@dataclass(frozen=True)
class Text:
    """Scalar value in its canonical string form."""

    value: str
    shape = "text"

    @property
    def is_empty(self) -> bool:
        return not self.value.strip()

    def render(self) -> str:
        return self.value


@dataclass(frozen=True)
class Sequence:
    """Non-empty collection of normalized elements, in iteration order."""

    items: tuple["NormalizedValue", ...]
    shape = "sequence"

    @property
    def is_empty(self) -> bool:
        return not self.items

    def render(self) -> str:
        return "[" + ", ".join(item.render() for item in self.items) + "]"

    def difference(self, other: "NormalizedValue") -> tuple["NormalizedValue", ...]:
        """Return the items of this sequence that are not members of ``other``.

        ``other`` may be :class:`Empty`, which behaves as an empty collection.
        """
        others = set(other.items) if isinstance(other, Sequence) else set()
        return tuple(item for item in self.items if item not in others)


NormalizedValue = Empty | Text | Sequence

EMPTY = Empty()
