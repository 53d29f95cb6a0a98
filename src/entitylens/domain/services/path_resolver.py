"""Dotted property path resolution over records and mappings.

Paths look like ``firstName`` or ``address.zip``. Each segment is looked up by
key on mappings and through an accessor on other objects. When an intermediate
value is a collection, the rest of the path is applied to every element.
"""

import dataclasses
import inspect
import types
import typing
from collections.abc import Mapping
from datetime import date, time
from decimal import Decimal
from typing import Any

from sqlalchemy import inspect as sqlalchemy_inspect

from entitylens.core.logging import get_logger
from entitylens.domain.exceptions import PathResolutionError

logger = get_logger(__name__)

_MISSING = object()

# Values that can never be traversed further.
_SCALAR_TYPES = (str, bytes, bool, int, float, Decimal, date, time)


def is_collection(value: Any) -> bool:
    """Check whether a value is a collection or a mapping (strings excluded)."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if isinstance(value, Mapping):
        return True
    return is_sequence_like(value)


def is_sequence_like(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    if isinstance(value, (list, tuple, set, frozenset)):
        return True
    # ORM collections and other sized iterables
    return hasattr(value, "__iter__") and hasattr(value, "__len__")


def _getter_names(name: str) -> list[str]:
    return [f"get_{name}", f"get{name[:1].upper()}{name[1:]}"]


class FieldPathResolver:
    """Reads values and declared types of dotted property paths.

    The resolver holds no state and is safe to share between threads.
    """

    def resolve(self, record: Any, path: str) -> Any:
        """Resolve a dotted path against a record.

        Args:
            record: Record, mapping or any object.
            path: Field name or dotted path.

        Returns:
            The resolved value. For paths that cross a collection, a list with
            one result per element (elements resolving to None are skipped).

        Raises:
            PathResolutionError: If a key or accessor is missing, an accessor
                raises, or a non-terminal segment is not traversable.
        """
        if not path:
            raise PathResolutionError(path, ValueError("empty path"))
        return self._resolve(record, path, path)

    def resolve_nullable(self, record: Any, path: str) -> Any:
        """Resolve a path, treating any resolution failure as an absent value."""
        try:
            return self.resolve(record, path)
        except PathResolutionError as e:
            logger.debug("Path resolved to absent value", path=path, error=str(e))
            return None

    def resolve_type(self, record: Any, path: str) -> type:
        """Return the declared type of the final accessor of a path.

        Declared types come from class annotations (dataclass fields, annotated
        attributes, property and getter return annotations) or SQLAlchemy
        column types. When nothing is declared the runtime value's type is used.

        Raises:
            PathResolutionError: Under the same conditions as :meth:`resolve`.
        """
        if not path:
            raise PathResolutionError(path, ValueError("empty path"))
        head, _, rest = path.partition(".")
        if rest:
            value = self._read_segment(record, head, path)
            if value is None:
                raise PathResolutionError(path, ValueError(f"{head} is None"))
            if is_sequence_like(value):
                value = next((item for item in value if item is not None), None)
                if value is None:
                    raise PathResolutionError(path, ValueError(f"{head} has no elements"))
            return self.resolve_type(value, rest)

        declared = self._declared_type(record, head)
        if declared is not None:
            return declared
        value = self._read_segment(record, head, path)
        return type(value)

    def _resolve(self, record: Any, path: str, full_path: str) -> Any:
        head, _, rest = path.partition(".")
        value = self._read_segment(record, head, full_path)
        if not rest or value is None:
            return value

        if is_sequence_like(value):
            results = []
            for element in value:
                if element is None:
                    continue
                result = self._resolve(element, rest, full_path)
                if result is not None:
                    results.append(result)
            return results

        if isinstance(value, _SCALAR_TYPES):
            raise PathResolutionError(
                full_path,
                TypeError(f"{head} resolved to non-traversable {type(value).__name__}"),
            )
        return self._resolve(value, rest, full_path)

    def _read_segment(self, record: Any, name: str, full_path: str) -> Any:
        if isinstance(record, Mapping):
            try:
                return record[name]
            except KeyError as e:
                raise PathResolutionError(full_path, e) from e

        try:
            if name.startswith("get"):
                accessor = getattr(record, name, _MISSING)
                if inspect.ismethod(accessor):
                    return accessor()

            value = getattr(record, name, _MISSING)
            if value is not _MISSING:
                return value

            for getter_name in _getter_names(name):
                getter = getattr(record, getter_name, _MISSING)
                if callable(getter):
                    return getter()
        except PathResolutionError:
            raise
        except Exception as e:
            raise PathResolutionError(full_path, e) from e

        raise PathResolutionError(
            full_path,
            AttributeError(f"{type(record).__name__} has no accessor for {name}"),
        )

    def _declared_type(self, record: Any, name: str) -> type | None:
        if isinstance(record, Mapping):
            return None
        cls = record if isinstance(record, type) else type(record)

        # Properties and getter methods declare their return annotation
        for attr_name in [name] + _getter_names(name):
            attr = inspect.getattr_static(cls, attr_name, None)
            if isinstance(attr, property) and attr.fget is not None:
                return _origin(_hints(attr.fget).get("return"))
            if inspect.isfunction(attr) and (attr_name != name or name.startswith("get")):
                return _origin(_hints(attr).get("return"))

        mapped = _mapped_column_type(cls, name)
        if mapped is not None:
            return mapped

        hints = _hints(cls)
        if name in hints:
            return _origin(hints[name])
        if dataclasses.is_dataclass(cls):
            for f in dataclasses.fields(cls):
                if f.name == name and isinstance(f.type, type):
                    return f.type
        return None


def _hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except Exception:
        # Unresolvable forward references, fall back to raw annotations
        return dict(getattr(obj, "__annotations__", {}) or {})


def _origin(hint: Any) -> type | None:
    """Reduce a type hint to a concrete class (``Optional[int]`` -> ``int``)."""
    if hint is None:
        return None
    if isinstance(hint, type) and typing.get_origin(hint) is None:
        return hint
    origin = typing.get_origin(hint)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        return _origin(args[0]) if len(args) == 1 else object
    if origin is not None:
        # Mapped[int] and friends wrap the real type
        if getattr(origin, "__name__", "") == "Mapped":
            return _origin(typing.get_args(hint)[0])
        return origin if isinstance(origin, type) else object
    return None


def _mapped_column_type(cls: type, name: str) -> type | None:
    mapper = sqlalchemy_inspect(cls, raiseerr=False)
    if mapper is None or not hasattr(mapper, "columns"):
        return None
    column = mapper.columns.get(name)
    if column is None:
        relationship = mapper.relationships.get(name) if hasattr(mapper, "relationships") else None
        if relationship is None:
            return None
        target = relationship.mapper.class_
        return list if relationship.uselist else target
    try:
        return column.type.python_type
    except NotImplementedError:
        return None
