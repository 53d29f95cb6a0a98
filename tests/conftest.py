"""Pytest configuration for all tests."""

from dataclasses import dataclass, field
from datetime import date

import pytest

from entitylens.domain.entities import BaseEntity, CodedReference, FieldDescriptor
from entitylens.domain.services import (
    AuditDiffService,
    FieldPathResolver,
    ParameterSubstitution,
    QueryBuilder,
    ValueNormalizer,
)
from entitylens.infrastructure.metadata import InMemoryMetadataCatalog


@dataclass(eq=False)
class Clan(BaseEntity):
    name: str = ""


@dataclass(eq=False)
class Ninja(BaseEntity):
    first_name: str = ""
    email: str | None = None
    join_date: date | None = None
    age: int | None = None
    active: bool | None = None
    status: CodedReference | None = None
    clan: Clan | None = None
    tags: list[str] = field(default_factory=list)

    def get_display_name(self) -> str:
        return f"{self.first_name} of {self.clan.name}" if self.clan else self.first_name


ACTIVE = CodedReference(key="ACTIVE", value="Active", category="ninja_status")
RETIRED = CodedReference(key="RETIRED", value="Retired", category="ninja_status")


@pytest.fixture
def ninja_type() -> type:
    return Ninja


@pytest.fixture
def clan_type() -> type:
    return Clan


@pytest.fixture
def leaf() -> Clan:
    return Clan(name="Leaf", id=7)


@pytest.fixture
def ninja(leaf) -> Ninja:
    return Ninja(
        first_name="Naruto",
        email="naruto@leaf.jp",
        join_date=date(2023, 1, 2),
        age=17,
        active=True,
        status=ACTIVE,
        clan=leaf,
        tags=["hokage", "fox"],
        id=1,
    )


@pytest.fixture
def catalog() -> InMemoryMetadataCatalog:
    """Catalog describing the sample Ninja and Clan records."""
    catalog = InMemoryMetadataCatalog()
    catalog.register(
        Ninja,
        [
            FieldDescriptor("first_name", "First Name", is_primary=True, is_searchable=True),
            FieldDescriptor("email", "Email Address", is_searchable=True),
            FieldDescriptor("join_date", "Join Date"),
            FieldDescriptor("age", "Age", is_searchable=True),
            FieldDescriptor("active", "Active", is_searchable=True),
            FieldDescriptor("status", "Status", is_searchable=True),
            FieldDescriptor("clan", "Clan", is_searchable=True),
            FieldDescriptor("tags", "Tags"),
        ],
    )
    catalog.register(Clan, [FieldDescriptor("name", "Name", is_primary=True, is_searchable=True)])
    return catalog


@pytest.fixture
def resolver() -> FieldPathResolver:
    return FieldPathResolver()


@pytest.fixture
def normalizer() -> ValueNormalizer:
    return ValueNormalizer(date_format="%Y-%m-%d", datetime_format="%Y-%m-%d %H:%M")


@pytest.fixture
def audit_service(catalog, normalizer) -> AuditDiffService:
    return AuditDiffService(catalog, normalizer=normalizer)


@pytest.fixture
def query_builder(catalog) -> QueryBuilder:
    return QueryBuilder(catalog, alias="obj", url_encoding="utf-8")


@pytest.fixture
def substitution() -> ParameterSubstitution:
    return ParameterSubstitution()
