"""Tests for EntityCopier."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from entitylens.domain.entities import BaseEntity, FieldDescriptor, RecordSnapshot
from entitylens.domain.exceptions import MetadataNotFoundError
from entitylens.domain.services import EntityCopier


@dataclass(eq=False)
class Sensei(BaseEntity):
    name: str = ""
    student: Student | None = None


@dataclass(eq=False)
class Student(BaseEntity):
    name: str = ""
    sensei: Sensei | None = None

    def __post_init__(self):
        self.initialized = True


@dataclass(eq=False)
class Mission(BaseEntity):
    rank: str = ""
    reports: list = field(default_factory=list)
    team: tuple = ()


@pytest.fixture
def copier(catalog) -> EntityCopier:
    catalog.register(Sensei)
    catalog.register(Student)
    catalog.register("Scroll", ["title", "tags"])
    catalog.register(
        Mission,
        [FieldDescriptor("rank", is_primary=True), FieldDescriptor("reports", is_persistent=False)],
    )
    return EntityCopier(catalog)


class TestCopy:
    """Test structural copies."""

    def test_fields_and_identity_copied(self, copier, ninja):
        clone = copier.copy(ninja)

        assert clone is not ninja
        assert type(clone) is type(ninja)
        assert clone.id == 1
        assert clone.first_name == "Naruto"
        assert clone.join_date == ninja.join_date

    def test_registered_nested_record_copied(self, copier, ninja):
        clone = copier.copy(ninja)

        assert clone.clan is not ninja.clan
        assert clone.clan.name == "Leaf"
        assert clone.clan.id == 7

    def test_collections_rebuilt(self, copier, ninja):
        clone = copier.copy(ninja)

        assert clone.tags == ["hokage", "fox"]
        assert clone.tags is not ninja.tags

    def test_unregistered_values_shared(self, copier, ninja):
        assert copier.copy(ninja).status is ninja.status

    def test_copy_is_independent(self, copier, ninja):
        clone = copier.copy(ninja)
        clone.tags.append("sage")
        clone.clan.name = "Sand"

        assert ninja.tags == ["hokage", "fox"]
        assert ninja.clan.name == "Leaf"

    def test_non_persistent_fields_not_copied(self, catalog, ninja):
        catalog.register(
            type(ninja),
            [
                FieldDescriptor("first_name", is_primary=True),
                FieldDescriptor("email", is_persistent=False),
            ],
        )

        clone = EntityCopier(catalog).copy(ninja)

        assert clone.first_name == "Naruto"
        assert clone.email is None

    def test_init_not_run(self, copier):
        student = Student(name="Sakura", id=2)

        clone = copier.copy(student)

        assert clone.name == "Sakura"
        assert "initialized" not in vars(clone)

    def test_cycles_preserved(self, copier):
        sensei = Sensei(name="Kakashi", id=1)
        student = Student(name="Sakura", sensei=sensei, id=2)
        sensei.student = student

        clone = copier.copy(sensei)

        assert clone is not sensei
        assert clone.student is not student
        assert clone.student.sensei is clone

    def test_snapshot(self, copier):
        snapshot = RecordSnapshot("Scroll", {"id": 4, "title": "Rasengan", "tags": ["a"]})

        clone = copier.copy(snapshot)

        assert isinstance(clone, RecordSnapshot)
        assert clone.entity_type == "Scroll"
        assert clone == snapshot
        assert clone["tags"] is not snapshot["tags"]

    def test_unregistered_type_raises(self, copier):
        with pytest.raises(MetadataNotFoundError):
            copier.copy(object())

    def test_skipped_dataclass_fields_get_defaults(self, copier):
        mission = Mission(rank="S", reports=["scouted"], team=("Kakashi",), id=3)

        clone = copier.copy(mission)

        assert clone.rank == "S"
        assert clone.reports == []
        clone.reports.append("filed")
        assert mission.reports == ["scouted"]
        assert clone.team == ()

    def test_skipped_default_factories_not_shared_between_copies(self, copier):
        mission = Mission(rank="A", id=4)

        first = copier.copy(mission)
        second = copier.copy(mission)

        assert first.reports is not second.reports
