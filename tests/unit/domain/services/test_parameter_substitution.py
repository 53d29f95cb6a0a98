"""Tests for ParameterSubstitution."""

from datetime import date

import pytest

from entitylens.domain.entities import CodedReference, RecordSnapshot
from entitylens.domain.services import ParameterSubstitution


class TestReplaceParameters:
    """Test template substitution."""

    def test_number_and_text(self, substitution):
        assert substitution.replace_parameters(":id = :name", {"id": 5, "name": "Bob"}) == "5 = 'Bob'"

    def test_coded_reference_collection(self, substitution):
        record = {"tags": [CodedReference(key="x"), CodedReference(key="y")]}
        assert substitution.replace_parameters(":tags", record) == "'x', 'y'"

    def test_entity_collection_uses_identity(self, substitution, clan_type):
        record = {"clans": [clan_type(name="Leaf", id=7), clan_type(name="Sand")]}
        assert substitution.replace_parameters("clan_id in :clans", record) == "clan_id in 7, null"

    def test_string_identities_quoted(self, substitution):
        clans = [RecordSnapshot("Clan", {"id": "leaf"}), RecordSnapshot("Clan", {"id": "o'clan"})]
        record = {"clans": clans}
        assert substitution.replace_parameters("clan_id in (:clans )", record) == (
            "clan_id in ('leaf', 'o''clan' )"
        )

    def test_absent_is_null(self, substitution):
        assert substitution.replace_parameters("email = :email", {}) == "email = null"

    def test_same_token_replaced_everywhere(self, substitution):
        template = "a = :name or b = :name"
        assert substitution.replace_parameters(template, {"name": "Bob"}) == "a = 'Bob' or b = 'Bob'"

    def test_token_prefix_not_confused(self, substitution):
        record = {"id": 1, "id2": 2}
        assert substitution.replace_parameters(":id2 > :id", record) == "2 > 1"

    def test_quotes_escaped(self, substitution):
        assert substitution.replace_parameters(":name", {"name": "O'Brien"}) == "'O''Brien'"

    def test_nested_path(self, substitution, ninja):
        template = "select * from ninja where clan_id = :clan.id and status = :status.key"
        assert substitution.replace_parameters(template, ninja) == (
            "select * from ninja where clan_id = 7 and status = 'ACTIVE'"
        )

    def test_snapshot_record(self, substitution):
        record = RecordSnapshot("Person", {"id": 3, "active": True})
        assert substitution.replace_parameters(":id :active", record) == "3 true"

    def test_template_without_tokens(self, substitution):
        assert substitution.replace_parameters("select 1", {}) == "select 1"


class TestToLiteral:
    """Test literal rendering of single values."""

    @pytest.mark.parametrize(
        "value,literal",
        [
            (None, "null"),
            ("abc", "'abc'"),
            (42, "42"),
            (1.5, "1.5"),
            (False, "false"),
            (date(2023, 1, 2), "2023-01-02"),
            (CodedReference(key="ACTIVE"), "ACTIVE"),
            (["a", None, 3], "'a', '3'"),
            ([], ""),
        ],
    )
    def test_literals(self, value, literal):
        assert ParameterSubstitution.to_literal(value) == literal
