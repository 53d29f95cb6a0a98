"""Snapshot of a dynamic record.

Wraps plain dictionary data (for example a decoded JSON document) so it can be
described by the metadata catalog under a type name, without a real class.
"""

from collections.abc import Iterator, Mapping
from typing import Any


class RecordSnapshot(Mapping[str, Any]):
    """A detached snapshot of a dynamic record's state.

    Field access goes through the mapping interface, so dotted paths resolve
    the same way they do for plain dictionaries.
    """

    def __init__(self, entity_type: str, record_data: Mapping[str, Any]):
        """Initialize the snapshot.

        Args:
            entity_type: Name the record type is registered under in the catalog.
            record_data: Field values of the record.
        """
        self.entity_type = entity_type
        self._data = dict(record_data)

    @property
    def id(self) -> Any:
        return self._data.get("id")

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __str__(self) -> str:
        return f"{self.entity_type}#{self.id}" if self.id is not None else self.entity_type

    def __repr__(self) -> str:
        return f"RecordSnapshot({self.entity_type!r}, {self._data!r})"
