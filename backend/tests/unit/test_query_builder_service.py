"""Unit tests for the QueryBuilderService (criteria editor + save)."""

import pytest

from demand_search.application.interfaces import MasterDataClient, SavedSearchStore
from demand_search.application.services import QueryBuilderService
from demand_search.domain.entities import BoolOperator, Domain, SavedSearch
from demand_search.domain.exceptions import QueryValidationError, UnknownFieldError


class FakeMasterDataClient(MasterDataClient):
    async def list_products(self):
        return [
            {"ProductID": "P1", "BusinessUnit": "Fast Food", "Level": "SKU"},
            {"ProductID": "P2", "BusinessUnit": "Beverages", "Level": "SKU"},
            {"ProductID": "P3", "BusinessUnit": None, "Level": "Family"},
        ]

    async def list_channels(self):
        return [{"ChannelID": "C1", "Level": "Store"}]

    async def list_locations(self):
        return []


class FakeSavedSearchStore(SavedSearchStore):
    """In-memory fake store for unit testing."""

    def __init__(self):
        self._saved: list[SavedSearch] = []

    async def list_all(self) -> list[SavedSearch]:
        return list(self._saved)

    async def create(self, name: str, query: str) -> SavedSearch:
        saved = SavedSearch(name=name, query=query, id=len(self._saved) + 1)
        self._saved.append(saved)
        return saved


@pytest.fixture
def store() -> FakeSavedSearchStore:
    return FakeSavedSearchStore()


@pytest.fixture
def builder(store) -> QueryBuilderService:
    return QueryBuilderService(FakeMasterDataClient(), store)


def test_field_options_per_domain(builder):
    tokens = [f.token for f in builder.field_options(Domain.LOCATION)]
    assert tokens == ["locationid", "locationdescr", "locationlevel", "geography"]


@pytest.mark.asyncio
async def test_value_options_are_distinct_sorted_and_non_blank(builder):
    await builder.load_master_data()

    assert builder.value_options("businessunit") == ["Beverages", "Fast Food"]
    assert builder.value_options("productlevel") == ["Family", "SKU"]
    assert builder.value_options("channellevel") == ["Store"]
    assert builder.value_options("geography") == []


def test_value_options_reject_unknown_token(builder):
    with pytest.raises(UnknownFieldError):
        builder.value_options("colour")


def test_add_criterion_ignores_blanks_and_duplicates(builder):
    assert builder.add_criterion("businessunit", "Fast Food") is True
    assert builder.add_criterion("businessunit", " Fast Food ") is False
    assert builder.add_criterion("isnew", "  ") is False
    assert builder.add_criterion("channellevel", "Store", "or") is True

    assert builder.query == 'businessunit:"*Fast Food*" OR channellevel:*Store*'


def test_add_criterion_rejects_unknown_token(builder):
    with pytest.raises(UnknownFieldError):
        builder.add_criterion("colour", "red")


def test_edit_operator_and_remove(builder):
    builder.add_criterion("productid", "P1")
    builder.add_criterion("channelid", "C1")
    builder.add_criterion("locationid", "L1")

    builder.set_operator(1, BoolOperator.OR)
    builder.remove_criterion(2)

    assert builder.query == "productid:*P1* OR channelid:*C1*"

    builder.clear()
    assert builder.query == ""


@pytest.mark.asyncio
async def test_save_validates_name_and_criteria(builder, store):
    with pytest.raises(QueryValidationError, match="Please enter a name."):
        await builder.save("  ")
    with pytest.raises(QueryValidationError, match="Please add at least one criterion."):
        await builder.save("Empty")

    builder.add_criterion("isnew", "Yes")
    saved = await builder.save(" New items ")

    assert saved.name == "New items"
    assert saved.query == "isnew:*Yes*"
    assert await store.list_all() == [saved]


@pytest.mark.asyncio
async def test_save_query_stores_raw_string(builder, store):
    saved = await builder.save_query("Stores", " channellevel:Store ")
    assert saved.query == "channellevel:Store"
