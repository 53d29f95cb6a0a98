"""Normalization of raw field values into comparable forms."""

from datetime import date, datetime, time
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from entitylens.core.config import get_settings
from entitylens.core.logging import get_logger
from entitylens.domain.entities.normalized_value import (
    EMPTY,
    NormalizedValue,
    Sequence,
    Text,
)
from entitylens.domain.services.value_classifier import ClassifiedValue, ValueKind, classify

logger = get_logger(__name__)


class ValueNormalizer:
    """Maps raw values to :class:`NormalizedValue` forms.

    Dates without a time of day render with ``date_format``; values carrying
    a time render with ``datetime_format``. Both default to the settings.
    """

    def __init__(self, date_format: str | None = None, datetime_format: str | None = None) -> None:
        settings = get_settings()
        self.date_format = date_format or settings.date_format
        self.datetime_format = datetime_format or settings.datetime_format

    def normalize(self, value: Any) -> NormalizedValue:
        """Normalize a raw value.

        Args:
            value: Raw field value, or an already classified value.

        Returns:
            NormalizedValue: Empty, Text or Sequence.
        """
        classified = value if isinstance(value, ClassifiedValue) else classify(value)
        kind = classified.kind

        if kind is ValueKind.ABSENT:
            return EMPTY

        if kind in (ValueKind.COLLECTION, ValueKind.MAPPING):
            try:
                if len(classified.raw) == 0:
                    return EMPTY
                if kind is ValueKind.MAPPING:
                    items = [Text(f"{k}={self.normalize(v).render()}") for k, v in classified.raw.items()]
                else:
                    normalized = (self.normalize(item) for item in classified.raw if item is not None)
                    items = [item for item in normalized if not item.is_empty]
            except SQLAlchemyError as e:
                # Uninitialized lazy collection on a detached instance
                logger.debug("Collection could not be loaded, treating as empty", error=str(e))
                return EMPTY
            return Sequence(tuple(items)) if items else EMPTY

        if kind is ValueKind.TEMPORAL:
            return Text(self.format_temporal(classified.raw))

        text = classified.text
        return Text(text) if text.strip() else EMPTY

    def format_temporal(self, value: date | time) -> str:
        """Format a date, datetime or time with the configured patterns."""
        if isinstance(value, datetime):
            if value.time() == time(0, 0):
                return value.strftime(self.date_format)
            return value.strftime(self.datetime_format).rstrip()
        if isinstance(value, date):
            return value.strftime(self.date_format)
        return value.isoformat()
