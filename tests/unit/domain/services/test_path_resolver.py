"""Tests for FieldPathResolver."""

from dataclasses import dataclass, field
from datetime import date

import pytest

from entitylens.domain.exceptions import PathResolutionError
from entitylens.domain.services import FieldPathResolver, is_collection


@dataclass
class Address:
    zip: str
    city: str | None = None


@dataclass
class Item:
    name: str | None


@dataclass
class Order:
    address: Address | None
    items: list[Item] = field(default_factory=list)
    placed: date | None = None

    @property
    def item_count(self) -> int:
        return len(self.items)

    def getTotal(self) -> float:
        return 9.5

    def get_customer(self) -> str:
        raise RuntimeError("customer service down")


@pytest.fixture
def order() -> Order:
    return Order(
        address=Address(zip="10115", city="Berlin"),
        items=[Item("kunai"), Item(None), Item("scroll")],
        placed=date(2023, 5, 1),
    )


class TestResolve:
    """Test strict path resolution."""

    def test_single_segment(self, resolver, order):
        assert resolver.resolve(order, "placed") == date(2023, 5, 1)

    def test_nested_path_matches_direct_access(self, resolver, order):
        assert resolver.resolve(order, "address.zip") == order.address.zip

    def test_collection_path_maps_elements_in_order(self, resolver, order):
        """Elements resolving to None are skipped."""
        assert resolver.resolve(order, "items.name") == ["kunai", "scroll"]

    def test_mapping_keys(self, resolver):
        record = {"address": {"zip": "10115"}, "items": [{"name": "a"}, {"name": "b"}]}
        assert resolver.resolve(record, "address.zip") == "10115"
        assert resolver.resolve(record, "items.name") == ["a", "b"]

    def test_none_intermediate_is_none(self, resolver):
        assert resolver.resolve(Order(address=None), "address.zip") is None

    def test_property(self, resolver, order):
        assert resolver.resolve(order, "item_count") == 3

    def test_camel_case_getter(self, resolver, order):
        assert resolver.resolve(order, "total") == 9.5

    def test_getter_called_by_name(self, resolver, order):
        assert resolver.resolve(order, "getTotal") == 9.5

    def test_missing_attribute_raises(self, resolver, order):
        with pytest.raises(PathResolutionError) as exc_info:
            resolver.resolve(order, "address.street")
        assert exc_info.value.path == "address.street"
        assert "Failed to retrieve value for address.street" in str(exc_info.value)

    def test_missing_key_raises(self, resolver):
        with pytest.raises(PathResolutionError):
            resolver.resolve({"a": 1}, "b")

    def test_raising_accessor_wrapped(self, resolver, order):
        with pytest.raises(PathResolutionError) as exc_info:
            resolver.resolve(order, "customer")
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_scalar_intermediate_raises(self, resolver, order):
        with pytest.raises(PathResolutionError, match="non-traversable"):
            resolver.resolve(order, "address.zip.code")

    def test_empty_path_raises(self, resolver, order):
        with pytest.raises(PathResolutionError):
            resolver.resolve(order, "")


class TestResolveNullable:
    """Test the nullable resolution used by the builders."""

    def test_failure_is_none(self, resolver, order):
        assert resolver.resolve_nullable(order, "address.street") is None
        assert resolver.resolve_nullable(order, "customer") is None

    def test_success_passes_through(self, resolver, order):
        assert resolver.resolve_nullable(order, "address.city") == "Berlin"


class TestResolveType:
    """Test declared type resolution."""

    def test_optional_annotation_unwrapped(self, resolver, order):
        assert resolver.resolve_type(order, "placed") is date

    def test_nested_declared_type(self, resolver, order):
        assert resolver.resolve_type(order, "address.city") is str

    def test_declared_type_of_unset_value(self, resolver):
        assert resolver.resolve_type(Order(address=Address(zip="1")), "placed") is date

    def test_collection_type(self, resolver, order):
        assert resolver.resolve_type(order, "items") is list

    def test_through_collection_uses_element(self, resolver, order):
        assert resolver.resolve_type(order, "items.name") is str

    def test_property_return_annotation(self, resolver, order):
        assert resolver.resolve_type(order, "item_count") is int

    def test_getter_return_annotation(self, resolver, order):
        assert resolver.resolve_type(order, "total") is float

    def test_mapping_uses_runtime_type(self, resolver):
        assert resolver.resolve_type({"age": 3}, "age") is int

    def test_none_intermediate_raises(self, resolver):
        with pytest.raises(PathResolutionError):
            resolver.resolve_type(Order(address=None), "address.zip")


class TestIsCollection:
    """Test collection detection."""

    @pytest.mark.parametrize("value", [[], (1,), {1}, {"a": 1}, frozenset()])
    def test_collections(self, value):
        assert is_collection(value) is True

    @pytest.mark.parametrize("value", ["abc", b"abc", 3, None, date(2023, 1, 1)])
    def test_non_collections(self, value):
        assert is_collection(value) is False
