"""Substitution of named parameters in SQL-like templates."""

import re
from typing import Any

from entitylens.core.logging import get_logger
from entitylens.domain.services.path_resolver import FieldPathResolver
from entitylens.domain.services.query_builder import escape_sql, identity_literal
from entitylens.domain.services.value_classifier import ValueKind, classify

logger = get_logger(__name__)

SQL_PARAM_PATTERN = re.compile(r":(\S+)")


class ParameterSubstitution:
    """Replaces ``:name`` tokens with literal values read from a record.

    A token is everything up to the next whitespace character, so
    ``:status.key`` reads a nested value.
    """

    def __init__(self, resolver: FieldPathResolver | None = None) -> None:
        self.resolver = resolver or FieldPathResolver()

    def replace_parameters(self, template: str, record: Any) -> str:
        """Replace every ``:name`` token in a template.

        Each distinct token is resolved once and all of its occurrences get
        the same literal. Unresolvable tokens become ``null``.

        Args:
            template: SQL-like text containing ``:name`` tokens.
            record: Record the token paths are resolved against.

        Returns:
            str: The template with all tokens replaced.
        """
        literals: dict[str, str] = {}

        def substitute(match: re.Match) -> str:
            name = match.group(1)
            if name not in literals:
                literals[name] = self.to_literal(self.resolver.resolve_nullable(record, name))
                logger.debug("Substituted parameter", parameter=name, literal=literals[name])
            return literals[name]

        return SQL_PARAM_PATTERN.sub(substitute, template)

    @staticmethod
    def to_literal(value: Any) -> str:
        """Render a raw value as a SQL literal."""
        classified = classify(value)
        kind = classified.kind

        if kind is ValueKind.ABSENT:
            return "null"
        if kind is ValueKind.TEXT:
            return f"'{escape_sql(classified.text)}'"
        if kind is ValueKind.COLLECTION:
            rendered = []
            for item in value:
                element = classify(item)
                if element.kind is ValueKind.ABSENT:
                    continue
                if element.kind is ValueKind.ENTITY:
                    rendered.append(identity_literal(element.identity))
                else:
                    rendered.append(f"'{escape_sql(element.text)}'")
            return ", ".join(rendered)
        return classified.text
