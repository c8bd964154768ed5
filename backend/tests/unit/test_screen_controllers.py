"""Unit tests for the screen controllers (search pipeline per screen)."""

import asyncio

import httpx
import pytest

from demand_search.application.interfaces import DetailClient, SearchClient
from demand_search.application.services import (
    SCREEN_CONFIGS,
    DetailScreen,
    ForecastElementScreen,
    MasterDataScreen,
    ScreenController,
    ScreenStatus,
    build_screens,
)
from demand_search.application.services.screen_controllers import (
    EMPTY_FORM_MESSAGE,
    NO_MATCHES_MESSAGE,
)
from demand_search.domain.entities import (
    Bucket,
    ChannelRow,
    DetailDataset,
    Domain,
    EntityKey,
    HistoryRow,
    LocationRow,
    ProductRow,
    SavedSearch,
    SearchResult,
)
from demand_search.domain.exceptions import PlanningServiceError
from demand_search.infrastructure.planning_api import PlanningApiClient


PRODUCTS = [
    {"ProductID": "P1", "ProductDescr": "Cola", "BusinessUnit": "Beverages", "IsNew": "Yes"},
    {"ProductID": "P2", "ProductDescr": "Burger", "BusinessUnit": "Fast Food", "IsNew": "No"},
    {"ProductID": "P3", "ProductDescr": "Fries", "BusinessUnit": "Fast Food", "IsNew": None},
]


class FakeSearchClient(SearchClient):
    """Returns canned keys per query and records every call."""

    def __init__(self, results: dict[str, list[EntityKey]] | None = None):
        self.results = results or {}
        self.calls: list[tuple[str, int, int]] = []
        self.error: PlanningServiceError | None = None

    async def search(self, query: str, limit: int = 5000, offset: int = 0) -> SearchResult:
        self.calls.append((query, limit, offset))
        if self.error:
            raise self.error
        keys = self.results.get(query, [])
        return SearchResult(query=query, count=len(keys), keys=keys)


class FakeDetailClient(DetailClient):
    def __init__(self):
        self.calls: list[tuple[DetailDataset, Bucket, list[EntityKey]]] = []

    async def fetch_by_keys(self, dataset, bucket, keys):
        self.calls.append((dataset, bucket, list(keys)))
        return [
            {"ProductID": k.product_id, "ChannelID": k.channel_id, "LocationID": k.location_id,
             "Period": bucket.value, "Qty": 10}
            for k in keys
        ]


class GatedSearchClient(SearchClient):
    """Each call waits on its own event so tests control completion order."""

    def __init__(self):
        self.gates: dict[str, asyncio.Event] = {}
        self.keys: dict[str, list[EntityKey]] = {}

    async def search(self, query: str, limit: int = 5000, offset: int = 0) -> SearchResult:
        gate = self.gates.setdefault(query, asyncio.Event())
        await gate.wait()
        return SearchResult(query=query, keys=self.keys.get(query, []))


def _product_screen(search_client: SearchClient, rows=PRODUCTS) -> MasterDataScreen:
    async def loader():
        return rows

    return MasterDataScreen(SCREEN_CONFIGS["product"], Domain.PRODUCT, ProductRow, loader, search_client)


def _history_screen(search_client: SearchClient, detail_client: DetailClient) -> DetailScreen:
    return DetailScreen(
        SCREEN_CONFIGS["history"], DetailDataset.HISTORY, HistoryRow, search_client, detail_client
    )


# ── Master data screens ──


@pytest.mark.asyncio
async def test_load_coerces_master_rows_and_starts_empty():
    screen = _product_screen(FakeSearchClient())

    assert await screen.load() is True

    assert screen.status is ScreenStatus.LOADED
    assert [r.product_id for r in screen.master_rows] == ["P1", "P2", "P3"]
    assert screen.master_rows[2].is_new == ""
    assert screen.state.filtered_rows == []


@pytest.mark.asyncio
async def test_load_failure_reports_domain_message():
    async def failing_loader():
        raise PlanningServiceError("products", 500, "boom")

    screen = MasterDataScreen(
        SCREEN_CONFIGS["channel"], Domain.CHANNEL, ChannelRow, failing_loader, FakeSearchClient()
    )

    assert await screen.load() is False
    assert screen.status is ScreenStatus.FAILED
    assert screen.error_message == "Failed to load channels."


@pytest.mark.asyncio
async def test_search_compiles_query_and_filters_master_rows():
    client = FakeSearchClient({"businessunit:\"*Fast Food*\"": [EntityKey("P3", "C1", "L1")]})
    screen = _product_screen(client)
    await screen.load()

    assert await screen.search("Business Unit", "Fast Food") is False  # label, not a field name
    assert screen.error_message == "Please choose a valid product attribute."

    assert await screen.search("BusinessUnit", "Fast Food") is True

    assert client.calls == [('businessunit:"*Fast Food*"', 20000, 0)]
    assert [r.product_id for r in screen.state.filtered_rows] == ["P3"]
    assert screen.last_query == 'businessunit:"*Fast Food*"'
    assert screen.error_message is None


@pytest.mark.asyncio
async def test_blank_term_empties_results_without_calling_search():
    client = FakeSearchClient({"productid:*P*": [EntityKey("P1"), EntityKey("P2")]})
    screen = _product_screen(client)
    await screen.load()
    await screen.search("ProductID", "P")
    assert len(screen.state.filtered_rows) == 2

    assert await screen.search("ProductID", "   ") is True

    assert screen.state.filtered_rows == []
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_unknown_field_keeps_existing_rows():
    client = FakeSearchClient({"productid:*P1*": [EntityKey("P1")]})
    screen = _product_screen(client)
    await screen.load()
    await screen.search("productid", "P1")

    await screen.search("channelid", "C1")

    assert screen.error_message == "Please choose a valid product attribute."
    assert [r.product_id for r in screen.state.filtered_rows] == ["P1"]


@pytest.mark.asyncio
async def test_search_failure_keeps_rows_and_surfaces_detail():
    client = FakeSearchClient({"productid:*P1*": [EntityKey("P1")]})
    screen = _product_screen(client)
    await screen.load()
    await screen.search("productid", "P1")

    client.error = PlanningServiceError("search", 503, "Search index offline")
    assert await screen.search("productid", "P2") is False

    assert screen.status is ScreenStatus.FAILED
    assert screen.error_message == "Search index offline"
    assert [r.product_id for r in screen.state.filtered_rows] == ["P1"]


@pytest.mark.asyncio
async def test_search_failure_without_detail_uses_fallback():
    client = FakeSearchClient()
    client.error = PlanningServiceError("search", 500, "")
    screen = _product_screen(client)
    await screen.load()

    await screen.search("productid", "P1")

    assert screen.error_message == "Search failed."


@pytest.mark.asyncio
async def test_replay_rejects_saved_search_of_another_domain():
    client = FakeSearchClient()
    screen = _product_screen(client)
    await screen.load()

    ok = await screen.replay_saved(SavedSearch(name="Stores", query="channellevel:Store"))

    assert ok is False
    assert screen.error_message == (
        "This saved search does not include product attributes. "
        "Product page only runs searches with product fields."
    )
    assert client.calls == []


@pytest.mark.asyncio
async def test_location_screen_rejection_names_the_location_page():
    async def loader():
        return [{"LocationID": "L1"}]

    screen = MasterDataScreen(
        SCREEN_CONFIGS["location"], Domain.LOCATION, LocationRow, loader, FakeSearchClient()
    )
    await screen.load()

    await screen.replay_saved(SavedSearch(name="New", query="isnew:Yes"))

    assert screen.error_message == (
        "This saved search does not include location attributes. "
        "The Location page only runs searches with location fields."
    )


@pytest.mark.asyncio
async def test_dropdown_options_and_exact_filters():
    client = FakeSearchClient({"productid:*P*": [EntityKey("P1"), EntityKey("P2"), EntityKey("P3")]})
    screen = _product_screen(client)
    await screen.load()
    await screen.search("productid", "P")

    assert screen.dropdown_options() == {
        "business_unit": ["Beverages", "Fast Food"],
        "is_new": ["No", "Yes"],
    }

    screen.apply_dropdown_filters({"business_unit": "Fast Food", "is_new": ""})
    assert [r.product_id for r in screen.state.filtered_rows] == ["P2", "P3"]

    with pytest.raises(ValueError):
        screen.apply_dropdown_filters({"product_family": "x"})


# ── Latest request wins ──


@pytest.mark.asyncio
async def test_newer_search_cancels_the_one_in_flight():
    client = GatedSearchClient()
    client.keys = {"productid:*P1*": [EntityKey("P1")], "productid:*P2*": [EntityKey("P2")]}
    client.gates = {query: asyncio.Event() for query in client.keys}
    screen = _product_screen(client)
    await screen.load()

    first = asyncio.create_task(screen.search("productid", "P1"))
    await asyncio.sleep(0)
    second = asyncio.create_task(screen.search("productid", "P2"))
    await asyncio.sleep(0)

    client.gates["productid:*P2*"].set()
    assert await second is True
    assert await first is False

    assert [r.product_id for r in screen.state.filtered_rows] == ["P2"]
    assert screen.last_query == "productid:*P2*"
    assert screen.status is ScreenStatus.LOADED


@pytest.mark.asyncio
async def test_rejected_search_discards_the_one_in_flight():
    client = GatedSearchClient()
    client.keys = {"productid:*P1*": [EntityKey("P1")]}
    client.gates = {query: asyncio.Event() for query in client.keys}
    screen = _product_screen(client)
    await screen.load()

    pending = asyncio.create_task(screen.search("ProductID", "P1"))
    await asyncio.sleep(0)
    assert screen.status is ScreenStatus.LOADING

    assert await screen.search("bogus", "x") is False
    client.gates["productid:*P1*"].set()

    assert await pending is False
    assert screen.error_message == "Please choose a valid product attribute."
    assert screen.state.filtered_rows == []
    assert screen.status is ScreenStatus.LOADED


@pytest.mark.asyncio
async def test_empty_form_discards_forecast_element_search_in_flight():
    client = GatedSearchClient()
    client.keys = {"productid:*P1*": [EntityKey("P1", "C1", "L1")]}
    client.gates = {query: asyncio.Event() for query in client.keys}
    screen = ForecastElementScreen(SCREEN_CONFIGS["forecast-element"], client)

    pending = asyncio.create_task(screen.search_fields(product="P1"))
    await asyncio.sleep(0)
    assert await screen.search_fields() is False
    client.gates["productid:*P1*"].set()

    assert await pending is False
    assert screen.error_message == EMPTY_FORM_MESSAGE
    assert screen.state.all_rows == []
    assert screen.status is ScreenStatus.IDLE


def test_screen_controller_is_abstract():
    with pytest.raises(TypeError):
        ScreenController(SCREEN_CONFIGS["product"], ProductRow, FakeSearchClient())


# ── Detail screens ──


@pytest.mark.asyncio
async def test_replay_fetches_details_for_all_keys():
    keys = [EntityKey("P1", "C1", "L1"), EntityKey("P2", "C1", "L2")]
    search, detail = FakeSearchClient({"isnew:Yes": keys}), FakeDetailClient()
    screen = _history_screen(search, detail)

    assert await screen.replay_saved(SavedSearch(name="New", query="isnew:Yes")) is True

    assert search.calls == [("isnew:Yes", 5000, 0)]
    assert detail.calls == [(DetailDataset.HISTORY, Bucket.DAILY, keys)]
    assert [r.product_id for r in screen.state.all_rows] == ["P1", "P2"]
    assert screen.state.all_rows[0].qty == "10"
    assert screen.export_filename == "Filtered_History_Daily.csv"


@pytest.mark.asyncio
async def test_replay_flags_no_matches_without_calling_detail():
    search, detail = FakeSearchClient(), FakeDetailClient()
    screen = _history_screen(search, detail)

    await screen.replay_saved(SavedSearch(name="None", query="isnew:Maybe"))

    assert screen.error_message == NO_MATCHES_MESSAGE
    assert screen.status is ScreenStatus.LOADED
    assert screen.state.all_rows == []
    assert detail.calls == []


@pytest.mark.asyncio
async def test_bucket_change_reruns_selected_saved_search_silently():
    search, detail = FakeSearchClient({"isnew:Yes": [EntityKey("P1", "C1", "L1")]}), FakeDetailClient()
    screen = _history_screen(search, detail)

    assert await screen.set_bucket(Bucket.WEEKLY) is False  # nothing selected yet
    assert search.calls == []

    await screen.replay_saved(SavedSearch(name="New", query="isnew:Yes"))
    assert await screen.set_bucket("daily") is True
    assert detail.calls[-1][1] is Bucket.DAILY

    # the re-run never flags an empty result
    search.results = {}
    assert await screen.set_bucket("monthly") is True

    assert search.calls[-1] == ("isnew:Yes", 5000, 0)
    assert screen.error_message is None
    assert screen.state.all_rows == []
    assert screen.export_filename == "Filtered_History_Monthly.csv"


@pytest.mark.asyncio
async def test_detail_failure_uses_screen_fallback_and_keeps_rows():
    search, detail = FakeSearchClient({"isnew:Yes": [EntityKey("P1", "C1", "L1")]}), FakeDetailClient()
    screen = _history_screen(search, detail)
    await screen.replay_saved(SavedSearch(name="New", query="isnew:Yes"))

    search.error = PlanningServiceError("search", 0, "")
    await screen.replay_saved(SavedSearch(name="New", query="isnew:Yes"))

    assert screen.status is ScreenStatus.FAILED
    assert screen.error_message == "Failed to load history."
    assert len(screen.state.all_rows) == 1


# ── Forecast elements ──


@pytest.mark.asyncio
async def test_forecast_element_search_projects_keys():
    query = "productid:*P1* AND locationid:*L1*"
    client = FakeSearchClient({query: [EntityKey("P1", "C1", "L1"), EntityKey("P1", "C1", "L1")]})
    screen = ForecastElementScreen(SCREEN_CONFIGS["forecast-element"], client)

    assert await screen.search_fields(product="P1", channel="", location="L1") is True

    assert client.calls == [(query, 20000, 0)]
    assert [r.to_wire() for r in screen.state.all_rows] == [
        {"ProductID": "P1", "ChannelID": "C1", "LocationID": "L1"}
    ]


@pytest.mark.asyncio
async def test_forecast_element_empty_form_is_rejected():
    client = FakeSearchClient()
    screen = ForecastElementScreen(SCREEN_CONFIGS["forecast-element"], client)

    assert await screen.search_fields(" ", None, "") is False

    assert screen.error_message == EMPTY_FORM_MESSAGE
    assert client.calls == []


def test_build_screens_wires_every_screen():
    async def loader():
        return []

    screens = build_screens(
        FakeSearchClient(),
        FakeDetailClient(),
        {Domain.PRODUCT: loader, Domain.CHANNEL: loader, Domain.LOCATION: loader},
    )

    assert set(screens) == set(SCREEN_CONFIGS)
    assert screens["forecast"].export_filename == "Filtered_Forecast_Daily.csv"
    assert screens["location"].state.items_per_page == 5


@pytest.mark.asyncio
async def test_malformed_backend_payload_fails_the_screen_instead_of_hanging():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"query": "q", "count": "many", "keys": []})

    client = PlanningApiClient(
        "http://planning.test/api", http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )
    screen = ForecastElementScreen(SCREEN_CONFIGS["forecast-element"], client)

    assert await screen.search_fields(product="P1") is False

    assert screen.status is ScreenStatus.FAILED
    assert screen.error_message.startswith("Malformed search response")
