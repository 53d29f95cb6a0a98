"""Query-by-example clause and parameter building.

Builds JPQL/SQL-style filter fragments, flat key/value maps and URL parameter
strings from an example record. Values are classified once and each kind is
rendered by its own branch.
"""

from decimal import Decimal
from typing import Any
from urllib.parse import quote_plus

from entitylens.core.config import get_settings
from entitylens.core.logging import get_logger
from entitylens.domain.entities.field_descriptor import FieldDescriptor
from entitylens.domain.exceptions import EncodingError, UnsupportedPredicateError
from entitylens.domain.services.metadata_catalog import MetadataCatalog
from entitylens.domain.services.path_resolver import FieldPathResolver
from entitylens.domain.services.value_classifier import ClassifiedValue, ValueKind, classify

logger = get_logger(__name__)

_DEFAULT_ALIAS = object()


def escape_sql(value: str, like: bool = False) -> str:
    """Escape a string for use inside a single-quoted SQL literal.

    Args:
        value: Raw string.
        like: Also escape LIKE metacharacters with a backslash.

    Returns:
        str: The escaped string.
    """
    if like:
        value = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return value.replace("'", "''")


def identity_literal(identity: Any) -> str:
    """Render a record identity as a SQL literal; only numeric keys stay unquoted."""
    if identity is None:
        return "null"
    if isinstance(identity, (int, float, Decimal)) and not isinstance(identity, bool):
        return str(identity)
    return f"'{escape_sql(str(identity))}'"


class QueryBuilder:
    """Builds filter clauses, value maps and URL parameters from examples."""

    def __init__(
        self,
        catalog: MetadataCatalog,
        resolver: FieldPathResolver | None = None,
        alias: str | None | object = _DEFAULT_ALIAS,
        url_encoding: str | None = None,
    ) -> None:
        """Initialize the query builder.

        Args:
            catalog: Metadata catalog describing the example types.
            resolver: Path resolver, a default one is created if omitted.
            alias: Column prefix for clauses. Defaults to the configured alias;
                pass None for bare column names.
            url_encoding: Encoding used for URL parameters.
        """
        settings = get_settings()
        self.catalog = catalog
        self.resolver = resolver or FieldPathResolver()
        self.alias = settings.query_alias if alias is _DEFAULT_ALIAS else alias
        self.url_encoding = url_encoding or settings.url_encoding

    def build_map_values(
        self, entity: Any, fields: list[str] | None = None
    ) -> dict[str, Any]:
        """Convert a record into a flat field name to value map.

        Args:
            entity: Record to convert.
            fields: Field paths to read. Defaults to the catalog's persistent fields.

        Returns:
            dict: One entry per field that produced a value. For collections the
            last element wins.
        """
        if fields is None:
            fields = [f.field_name for f in self.catalog.persistent_fields(entity)]

        values: dict[str, Any] = {}
        for name in fields:
            value = classify(self.resolver.resolve_nullable(entity, name))
            if value.kind is ValueKind.COLLECTION:
                for element in value.raw:
                    if element is None:
                        continue
                    mapped = self._map_value(classify(element))
                    if mapped is not None:
                        values[name] = mapped
                continue
            mapped = self._map_value(value)
            if mapped is not None:
                values[name] = mapped
        return values

    def build_url_parameters(self, entity: Any, fields: list[str] | None = None) -> str:
        """Build a ``key=value&...`` string with percent-encoded values.

        Returns:
            str: The parameter string, empty when no field produced a value.
        """
        parameters = []
        for key, value in self.build_map_values(entity, fields).items():
            try:
                parameters.append(f"{key}={self._encode(key, value)}")
            except EncodingError as e:
                logger.error(
                    "Dropping URL parameter",
                    field=key,
                    encoding=self.url_encoding,
                    error=str(e),
                )
        return "&".join(parameters)

    def build_query_clause(self, example: Any, exact_match: bool = False) -> str:
        """Build a where clause from the searchable fields of an example.

        Args:
            example: Example record; only fields holding a value filter.
            exact_match: Compare text with ``=`` instead of ``LIKE``.

        Returns:
            str: ``" where ..."`` or an empty string when nothing filters, in
            which case the caller must omit the where clause.
        """
        predicates = []
        for field in self.catalog.searchable_fields(example):
            value = classify(self.resolver.resolve_nullable(example, field.field_name))
            try:
                predicate = self._predicate(field, value, exact_match)
            except UnsupportedPredicateError as e:
                logger.warning("Dropping field from query clause", field=field.field_name, error=str(e))
                continue
            if predicate:
                predicates.append(predicate)

        if not predicates:
            return ""
        return " where " + " and ".join(predicates)

    def _column(self, field: FieldDescriptor) -> str:
        return f"{self.alias}.{field.field_name}" if self.alias else field.field_name

    def _predicate(self, field: FieldDescriptor, value: ClassifiedValue, exact_match: bool) -> str | None:
        column = self._column(field)
        kind = value.kind

        if kind is ValueKind.ABSENT:
            return None
        if kind is ValueKind.TEXT and not exact_match:
            if value.is_blank:
                return None
            return f"{column} LIKE '%{escape_sql(value.text, like=True)}%' ESCAPE '\\'"
        if kind is ValueKind.CODED:
            if value.is_blank:
                return None
            return f"{column}.key = '{escape_sql(value.text)}'"
        if kind is ValueKind.ENTITY:
            if value.identity is None:
                return None
            return f"{column}.id = {identity_literal(value.identity)}"
        if kind in (ValueKind.NUMBER, ValueKind.BOOLEAN):
            return f"{column} = {value.text}"
        if kind is ValueKind.TYPE:
            return f"{column} = '{value.text}'"
        if kind in (ValueKind.COLLECTION, ValueKind.MAPPING):
            raise UnsupportedPredicateError(field.field_name, kind.value)
        if value.is_blank:
            return None
        return f"{column} = '{escape_sql(value.text)}'"

    @staticmethod
    def _map_value(value: ClassifiedValue) -> Any:
        if value.kind is ValueKind.ABSENT:
            return None
        if value.kind is ValueKind.CODED:
            return value.text or None
        if value.kind is ValueKind.ENTITY:
            return value.identity
        if value.is_blank:
            return None
        return value.text

    def _encode(self, key: str, value: Any) -> str:
        try:
            return quote_plus(str(value), encoding=self.url_encoding)
        except (UnicodeError, LookupError) as e:
            raise EncodingError(key, value, e) from e
