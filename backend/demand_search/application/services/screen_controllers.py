"""Screen controllers — load → compose query → search → reconcile → view state.

One controller instance owns the data of one screen. All searches of a
screen go through ``_run_latest``: starting a new one cancels the request
still in flight, and only the most recent request may touch the view state.

Failures never escape a controller. Validation problems and collaborator
errors end up in ``error_message``; the rows on screen stay as they were.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, NamedTuple

from demand_search.application.interfaces import DetailClient, SearchClient
from demand_search.domain.entities import (
    Bucket,
    ChannelRow,
    Criterion,
    DetailDataset,
    Domain,
    ForecastElementRow,
    ForecastRow,
    HistoryRow,
    LocationRow,
    ProductRow,
    SavedSearch,
)
from demand_search.domain.exceptions import (
    PlanningServiceError,
    QueryValidationError,
    SavedQueryNotApplicableError,
    UnknownFieldError,
)

from .field_registry import resolve
from .query_compiler import combine_fields, compile_query
from .result_reconciler import filter_master_rows, project_keys
from .saved_query_validator import is_applicable
from .view_state import RowT, ViewState

logger = logging.getLogger(__name__)

NO_MATCHES_MESSAGE = "No matches for this saved query."
EMPTY_FORM_MESSAGE = "Enter at least one of Product/Channel/Location."


class ScreenStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class ScreenConfig:
    """Static description of a screen.

    ``export_filename`` may contain a ``{bucket}`` placeholder, filled with
    the bucket label (``Daily``, ``Weekly``, ``Monthly``) on detail screens.
    """

    name: str
    title: str
    items_per_page: int
    search_limit: int
    export_filename: str
    failure_message: str = "Search failed."
    dropdown_columns: tuple[str, ...] = field(default_factory=tuple)


SCREEN_CONFIGS: dict[str, ScreenConfig] = {
    "product": ScreenConfig(
        name="product",
        title="Product",
        items_per_page=5,
        search_limit=20000,
        export_filename="Product_Search_Results.csv",
        dropdown_columns=("business_unit", "is_new"),
    ),
    "channel": ScreenConfig(
        name="channel",
        title="Channel",
        items_per_page=5,
        search_limit=20000,
        export_filename="Channel_Search_Results.csv",
    ),
    "location": ScreenConfig(
        name="location",
        title="Location",
        items_per_page=5,
        search_limit=20000,
        export_filename="Location_Search_Results.csv",
    ),
    "history": ScreenConfig(
        name="history",
        title="History",
        items_per_page=20,
        search_limit=5000,
        export_filename="Filtered_History_{bucket}.csv",
        failure_message="Failed to load history.",
    ),
    "forecast": ScreenConfig(
        name="forecast",
        title="Forecast",
        items_per_page=5,
        search_limit=5000,
        export_filename="Filtered_Forecast_{bucket}.csv",
        failure_message="Failed to load forecast.",
    ),
    "forecast-element": ScreenConfig(
        name="forecast-element",
        title="Forecast Element",
        items_per_page=20,
        search_limit=20000,
        export_filename="Filtered_ForecastElement.csv",
    ),
}


class LoadOutcome(NamedTuple):
    rows: list
    notice: str | None = None


class ScreenController(ABC, Generic[RowT]):
    """Shared plumbing of every screen: state machine, latest-wins searches, table ops."""

    def __init__(
        self,
        config: ScreenConfig,
        row_type: type[RowT],
        search_client: SearchClient,
    ):
        self.config = config
        self.state: ViewState[RowT] = ViewState(row_type, items_per_page=config.items_per_page)
        self.status = ScreenStatus.IDLE
        self.error_message: str | None = None
        self.last_query: str | None = None
        self._search_client = search_client
        self._generation = 0
        self._inflight: asyncio.Task | None = None
        self._settled_status = ScreenStatus.IDLE

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def export_filename(self) -> str:
        return self.config.export_filename

    # ── Table operations (synchronous) ───────────────────────────────

    def apply_local_filters(self, filters: dict[str, str | None], *, exact: bool = False) -> None:
        self.state.apply_local_filters(filters, exact=exact)

    def clear_filters(self) -> None:
        self.state.clear_filters()

    def sort_by(self, column: str) -> None:
        self.state.sort_by(column)

    def set_page(self, page: int) -> None:
        self.state.set_page(page)

    def export_csv(self) -> str | None:
        return self.state.export_csv()

    # ── Search pipeline ──────────────────────────────────────────────

    def _supersede(self) -> int:
        """Make every earlier request stale and cancel the one in flight."""
        self._generation += 1
        if self._inflight is not None and not self._inflight.done():
            logger.debug("%s: cancelling superseded request", self.name)
            self._inflight.cancel()
        return self._generation

    def _reject(self, error: QueryValidationError) -> bool:
        """Surface a validation failure without touching the rows.

        A rejected request still counts as the latest one: a search started
        before it can no longer overwrite the rows or the message.
        """
        logger.info("%s: rejected — %s", self.name, error.message)
        self._supersede()
        if self.status is ScreenStatus.LOADING:
            self.status = self._settled_status
        self.error_message = error.message
        return False

    async def _search_keys(self, query: str):
        logger.info("%s: searching q=%r limit=%d", self.name, query, self.config.search_limit)
        result = await self._search_client.search(query, limit=self.config.search_limit, offset=0)
        logger.info("%s: search returned %d keys", self.name, len(result.keys))
        return result.keys

    async def _run_latest(
        self,
        operation: Callable[[], Awaitable[LoadOutcome]],
        *,
        query: str | None = None,
    ) -> bool:
        """Run ``operation`` as the screen's only live request.

        Returns True when its rows were applied, False when it failed or was
        superseded by a newer request.
        """
        generation = self._supersede()
        if self.status is not ScreenStatus.LOADING:
            self._settled_status = self.status

        self.status = ScreenStatus.LOADING
        self.error_message = None
        task = asyncio.ensure_future(operation())
        self._inflight = task
        try:
            outcome = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                return False
            raise
        except PlanningServiceError as exc:
            if generation != self._generation:
                return False
            logger.warning("%s: %s", self.name, exc)
            self.status = ScreenStatus.FAILED
            self.error_message = exc.message or self.config.failure_message
            return False
        finally:
            if self._inflight is task:
                self._inflight = None

        if generation != self._generation:
            return False
        self.last_query = query
        self.state.replace_rows(outcome.rows)
        self.status = ScreenStatus.LOADED
        self.error_message = outcome.notice
        return True

    @abstractmethod
    async def replay_saved(self, saved: SavedSearch) -> bool:
        """Run a saved search on this screen."""
        ...


class MasterDataScreen(ScreenController[RowT]):
    """Product, channel and location screens (filter-mode reconciliation).

    The full master table is loaded once; each search narrows it to the rows
    whose identifier appears in the returned keys.
    """

    def __init__(
        self,
        config: ScreenConfig,
        domain: Domain,
        row_type: type[RowT],
        loader: Callable[[], Awaitable[list[dict[str, Any]]]],
        search_client: SearchClient,
    ):
        super().__init__(config, row_type, search_client)
        self.domain = Domain(domain)
        self.master_rows: list[RowT] = []
        self._loader = loader

    async def load(self) -> bool:
        """Load the master table; the result table starts empty."""
        self.status = ScreenStatus.LOADING
        self.error_message = None
        try:
            raw_rows = await self._loader()
        except PlanningServiceError as exc:
            logger.warning("%s: master data load failed: %s", self.name, exc)
            self.status = ScreenStatus.FAILED
            self.error_message = f"Failed to load {self.domain.value}s."
            return False

        self.master_rows = [self.state.row_type.from_wire(raw) for raw in raw_rows or []]
        self.state.clear()
        self.status = ScreenStatus.LOADED
        logger.info("%s: loaded %d master rows", self.name, len(self.master_rows))
        return True

    def dropdown_options(self) -> dict[str, list[str]]:
        """Distinct values of each dropdown column over the master table."""
        options: dict[str, list[str]] = {}
        for column in self.config.dropdown_columns:
            options[column] = sorted(
                {getattr(row, column) for row in self.master_rows if getattr(row, column)}
            )
        return options

    def apply_dropdown_filters(self, selections: dict[str, str | None]) -> None:
        """Exact-match dropdown filters applied on top of the search results."""
        unknown = set(selections) - set(self.config.dropdown_columns)
        if unknown:
            raise ValueError(f"Not a dropdown filter on {self.name}: {sorted(unknown)}")
        self.state.apply_local_filters(selections, exact=True)

    async def search(self, ui_field: str, term: str | None) -> bool:
        """Typed search on one attribute; a blank term empties the results."""
        self.error_message = None
        if not (term or "").strip():
            return await self._run_latest(self._empty)

        token = resolve(self.domain, ui_field)
        if token is None:
            return self._reject(UnknownFieldError(ui_field, self.domain.value))

        query = compile_query([Criterion(field=token, value=term or "")])
        return await self._run_query(query)

    async def replay_saved(self, saved: SavedSearch) -> bool:
        """Re-run a saved query, provided it filters on this screen's domain."""
        self.error_message = None
        if not is_applicable(self.domain, saved.query):
            return self._reject(SavedQueryNotApplicableError(self.domain.value, saved.query))
        return await self._run_query(saved.query)

    async def _empty(self) -> LoadOutcome:
        return LoadOutcome([])

    async def _run_query(self, query: str | None) -> bool:
        if not query:
            return await self._run_latest(self._empty)

        async def operation() -> LoadOutcome:
            keys = await self._search_keys(query)
            return LoadOutcome(filter_master_rows(self.domain, keys, self.master_rows))

        return await self._run_latest(operation, query=query)


class DetailScreen(ScreenController[RowT]):
    """History and forecast screens — keys seed a bulk detail fetch per bucket."""

    def __init__(
        self,
        config: ScreenConfig,
        dataset: DetailDataset,
        row_type: type[RowT],
        search_client: SearchClient,
        detail_client: DetailClient,
        *,
        bucket: Bucket = Bucket.DAILY,
    ):
        super().__init__(config, row_type, search_client)
        self.dataset = DetailDataset(dataset)
        self.bucket = Bucket(bucket)
        self.selected_saved: SavedSearch | None = None
        self._detail_client = detail_client

    @property
    def export_filename(self) -> str:
        return self.config.export_filename.format(bucket=self.bucket.label)

    async def replay_saved(self, saved: SavedSearch, *, flag_no_matches: bool = True) -> bool:
        self.selected_saved = saved
        return await self._run_query(saved.query, flag_no_matches=flag_no_matches)

    async def set_bucket(self, bucket: Bucket | str) -> bool:
        """Switch bucket and silently re-run the selected saved search, if any."""
        self.bucket = Bucket(bucket)
        if self.selected_saved is None:
            return False
        return await self._run_query(self.selected_saved.query, flag_no_matches=False)

    async def _run_query(self, query: str, *, flag_no_matches: bool) -> bool:
        bucket = self.bucket

        async def operation() -> LoadOutcome:
            keys = await self._search_keys(query)
            if not keys:
                return LoadOutcome([], NO_MATCHES_MESSAGE if flag_no_matches else None)
            raw_rows = await self._detail_client.fetch_by_keys(self.dataset, bucket, keys)
            logger.info(
                "%s: fetched %d %s rows for %d keys",
                self.name,
                len(raw_rows or []),
                bucket.value,
                len(keys),
            )
            return LoadOutcome([self.state.row_type.from_wire(raw) for raw in raw_rows or []])

        return await self._run_latest(operation, query=query)


class ForecastElementScreen(ScreenController[ForecastElementRow]):
    """Demand units straight from the search keys (projection mode)."""

    def __init__(self, config: ScreenConfig, search_client: SearchClient):
        super().__init__(config, ForecastElementRow, search_client)

    async def search_fields(
        self,
        product: str | None = None,
        channel: str | None = None,
        location: str | None = None,
    ) -> bool:
        """AND-combined typed search over the three identifier inputs."""
        query = combine_fields({"productid": product, "channelid": channel, "locationid": location})
        if query is None:
            return self._reject(QueryValidationError(EMPTY_FORM_MESSAGE))
        return await self._run_query(query)

    async def replay_saved(self, saved: SavedSearch) -> bool:
        self.error_message = None
        return await self._run_query(saved.query)

    async def _run_query(self, query: str) -> bool:
        async def operation() -> LoadOutcome:
            keys = await self._search_keys(query)
            return LoadOutcome(project_keys(keys))

        return await self._run_latest(operation, query=query)


def build_screens(
    search_client: SearchClient,
    detail_client: DetailClient,
    master_loaders: dict[Domain, Callable[[], Awaitable[list[dict[str, Any]]]]],
    configs: dict[str, ScreenConfig] | None = None,
) -> dict[str, ScreenController]:
    """Create one controller per screen, wired to the given collaborators."""
    configs = configs or SCREEN_CONFIGS
    return {
        "product": MasterDataScreen(
            configs["product"], Domain.PRODUCT, ProductRow, master_loaders[Domain.PRODUCT], search_client
        ),
        "channel": MasterDataScreen(
            configs["channel"], Domain.CHANNEL, ChannelRow, master_loaders[Domain.CHANNEL], search_client
        ),
        "location": MasterDataScreen(
            configs["location"], Domain.LOCATION, LocationRow, master_loaders[Domain.LOCATION], search_client
        ),
        "history": DetailScreen(
            configs["history"], DetailDataset.HISTORY, HistoryRow, search_client, detail_client
        ),
        "forecast": DetailScreen(
            configs["forecast"], DetailDataset.FORECAST, ForecastRow, search_client, detail_client
        ),
        "forecast-element": ForecastElementScreen(configs["forecast-element"], search_client),
    }
