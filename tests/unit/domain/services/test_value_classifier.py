"""Tests for value classification."""

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from entitylens.domain.entities import BaseEntity, CodedReference, RecordSnapshot
from entitylens.domain.services import ValueKind, classify, entity_identity


class TestClassify:
    """Test that every raw value gets exactly one kind."""

    @pytest.mark.parametrize(
        "value,kind",
        [
            (None, ValueKind.ABSENT),
            ("", ValueKind.TEXT),
            ("Naruto", ValueKind.TEXT),
            (True, ValueKind.BOOLEAN),
            (0, ValueKind.NUMBER),
            (2.5, ValueKind.NUMBER),
            (Decimal("1.10"), ValueKind.NUMBER),
            (date(2023, 1, 2), ValueKind.TEMPORAL),
            (datetime(2023, 1, 2, 3, 4), ValueKind.TEMPORAL),
            (time(12, 30), ValueKind.TEMPORAL),
            (CodedReference(key="ACTIVE"), ValueKind.CODED),
            (RecordSnapshot("Clan", {"id": 1}), ValueKind.ENTITY),
            (int, ValueKind.TYPE),
            ({"a": 1}, ValueKind.MAPPING),
            ([1, 2], ValueKind.COLLECTION),
            ({1, 2}, ValueKind.COLLECTION),
            (object(), ValueKind.OTHER),
        ],
    )
    def test_kinds(self, value, kind):
        assert classify(value).kind is kind

    def test_base_entity_subclass_is_entity(self, leaf):
        assert classify(leaf).kind is ValueKind.ENTITY

    def test_raw_value_kept(self):
        value = [1, 2]
        assert classify(value).raw is value


class TestClassifiedText:
    """Test canonical string forms."""

    def test_boolean_text(self):
        assert classify(True).text == "true"
        assert classify(False).text == "false"

    def test_coded_text_is_key(self):
        assert classify(CodedReference(key="ACTIVE", value="Active")).text == "ACTIVE"

    def test_type_text_is_qualified_name(self):
        assert classify(Decimal).text == "decimal.Decimal"

    def test_absent_text_is_blank(self):
        value = classify(None)
        assert value.text == ""
        assert value.is_blank is True

    def test_whitespace_is_blank(self):
        assert classify("   ").is_blank is True


class TestEntityIdentity:
    """Test identity extraction."""

    def test_base_entity(self, leaf):
        assert classify(leaf).identity == 7

    def test_unassigned_identity(self, clan_type):
        assert entity_identity(clan_type(name="Sand")) is None

    def test_snapshot_identity(self):
        assert entity_identity(RecordSnapshot("Clan", {"id": 3})) == 3

    def test_identity_only_for_entities(self):
        assert classify(5).identity is None

    def test_str_of_entity(self, leaf, clan_type):
        assert str(leaf) == "Clan#7"
        assert str(clan_type()) == "Clan"

    def test_base_entity_compares_by_object(self, clan_type):
        assert clan_type(name="Leaf", id=1) != clan_type(name="Leaf", id=1)
        assert isinstance(clan_type(), BaseEntity)
