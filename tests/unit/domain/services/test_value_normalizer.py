"""Tests for ValueNormalizer."""

from datetime import date, datetime, time

import pytest
from sqlalchemy.exc import SQLAlchemyError

from entitylens.domain.entities import EMPTY, CodedReference, Sequence, Text
from entitylens.domain.services import ValueNormalizer


class LazyCollection:
    """Collection whose contents cannot be loaded."""

    def __iter__(self):
        raise SQLAlchemyError("detached instance")

    def __len__(self):
        raise SQLAlchemyError("detached instance")


class TestNormalize:
    """Test normalization of raw values."""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n", [], (), set(), {}])
    def test_empty_values(self, normalizer, value):
        assert normalizer.normalize(value) == EMPTY

    def test_unloadable_collection_is_empty(self, normalizer):
        assert normalizer.normalize(LazyCollection()) == EMPTY

    def test_text(self, normalizer):
        assert normalizer.normalize("Naruto") == Text("Naruto")

    def test_number(self, normalizer):
        assert normalizer.normalize(30) == Text("30")

    def test_boolean(self, normalizer):
        assert normalizer.normalize(False) == Text("false")

    def test_coded_reference_by_key(self, normalizer):
        assert normalizer.normalize(CodedReference(key="ACTIVE", value="Active")) == Text("ACTIVE")

    def test_collection(self, normalizer):
        value = normalizer.normalize(["a", None, 2])
        assert value == Sequence((Text("a"), Text("2")))
        assert value.render() == "[a, 2]"

    def test_blank_collection_elements_dropped(self, normalizer):
        assert normalizer.normalize(["  ", "fox"]) == Sequence((Text("fox"),))

    def test_mapping(self, normalizer):
        value = normalizer.normalize({"rank": "jonin", "age": 30})
        assert value == Sequence((Text("rank=jonin"), Text("age=30")))

    def test_entity_uses_string_form(self, normalizer, leaf):
        assert normalizer.normalize(leaf) == Text("Clan#7")


class TestTemporal:
    """Test date and time rendering."""

    def test_date_uses_date_pattern(self, normalizer):
        assert normalizer.normalize(date(2023, 1, 2)) == Text("2023-01-02")

    def test_midnight_datetime_uses_date_pattern(self, normalizer):
        assert normalizer.normalize(datetime(2023, 1, 2)) == Text("2023-01-02")

    def test_datetime_uses_datetime_pattern(self, normalizer):
        assert normalizer.normalize(datetime(2023, 1, 2, 14, 5)) == Text("2023-01-02 14:05")

    def test_time(self, normalizer):
        assert normalizer.normalize(time(9, 30)) == Text("09:30:00")

    def test_default_patterns(self):
        normalizer = ValueNormalizer()
        assert normalizer.normalize(date(2023, 1, 2)) == Text("Mon, 02 Jan 2023")
        assert normalizer.normalize(datetime(2023, 1, 2, 14, 5, 6)) == Text("Mon, 02 Jan 2023 14:05:06")


class TestNormalizedValues:
    """Test normalized value behaviour."""

    def test_structural_equality(self):
        assert EMPTY == EMPTY
        assert Text("a") == Text("a")
        assert Text("a") != Text("b")

    def test_sequence_difference_by_membership(self):
        old = Sequence((Text("a"), Text("b")))
        new = Sequence((Text("b"), Text("c")))
        assert new.difference(old) == (Text("c"),)
        assert old.difference(new) == (Text("a"),)

    def test_difference_against_empty(self):
        value = Sequence((Text("a"),))
        assert value.difference(EMPTY) == (Text("a"),)

    def test_whitespace_text_is_empty(self):
        assert Text("  ").is_empty is True
