"""Planning backend client — implements the search, detail, master data and
saved-search ports over the planning REST API.

Endpoints (relative to the configured base URL):

    GET  /search?q=&limit=&offset=        → {query, count, keys}
    POST /history/{bucket}-by-keys         → [history rows]
    POST /forecast/{bucket}-by-keys        → [forecast rows]
    GET  /products | /channels | /locations
    GET  /saved-searches, POST /saved-searches
"""

import logging
from datetime import datetime
from typing import Any

import httpx

from demand_search.application.interfaces import (
    DetailClient,
    MasterDataClient,
    SavedSearchStore,
    SearchClient,
)
from demand_search.domain.entities import (
    Bucket,
    DetailDataset,
    EntityKey,
    SavedSearch,
    SearchResult,
)
from demand_search.domain.exceptions import PlanningServiceError

logger = logging.getLogger(__name__)


class PlanningApiClient(SearchClient, DetailClient, MasterDataClient, SavedSearchStore):
    """Infrastructure adapter for the planning backend.

    Uses an injected ``httpx.AsyncClient`` when given (shared connection
    pool, mock transports in tests); otherwise opens one per call.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000/api",
        *,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    # ── Transport ────────────────────────────────────────────────────

    async def _request(
        self,
        service: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        client = self._http_client or httpx.AsyncClient(timeout=self._timeout)
        should_close = self._http_client is None

        try:
            response = await client.request(method, url, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise PlanningServiceError(service, 0, str(exc) or exc.__class__.__name__) from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code >= 400:
            self._raise_service_error(service, response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise PlanningServiceError(
                service, response.status_code, "Invalid JSON in response"
            ) from exc

    @staticmethod
    def _expect_rows(service: str, data: Any) -> list[dict[str, Any]]:
        """A JSON array of objects; anything else is a backend failure."""
        if data is None:
            return []
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise PlanningServiceError(service, 200, "Expected a list of rows")
        return data

    @staticmethod
    def _raise_service_error(service: str, response: httpx.Response) -> None:
        """Raise PlanningServiceError, preferring the backend's ``detail`` text."""
        message = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("detail"):
            detail = body["detail"]
            message = detail if isinstance(detail, str) else str(detail)
        if not message:
            message = response.text.strip() or response.reason_phrase
        logger.error("%s: HTTP %d — %s", service, response.status_code, message)
        raise PlanningServiceError(service, response.status_code, message)

    # ── SearchClient ─────────────────────────────────────────────────

    async def search(self, query: str, limit: int = 5000, offset: int = 0) -> SearchResult:
        data = await self._request(
            "search",
            "GET",
            "/search",
            params={"q": query, "limit": limit, "offset": offset},
        )
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise PlanningServiceError("search", 200, "Unexpected search response")
        try:
            return SearchResult.from_wire(data)
        except (AttributeError, TypeError, ValueError) as exc:
            raise PlanningServiceError("search", 200, f"Malformed search response: {exc}") from exc

    # ── DetailClient ─────────────────────────────────────────────────

    async def fetch_by_keys(
        self,
        dataset: DetailDataset,
        bucket: Bucket,
        keys: list[EntityKey],
    ) -> list[dict[str, Any]]:
        dataset = DetailDataset(dataset)
        bucket = Bucket(bucket)
        data = await self._request(
            dataset.value,
            "POST",
            f"/{dataset.value}/{bucket.value}-by-keys",
            json={"keys": [key.to_wire() for key in keys]},
        )
        return self._expect_rows(dataset.value, data)

    # ── MasterDataClient ─────────────────────────────────────────────

    async def list_products(self) -> list[dict[str, Any]]:
        return self._expect_rows("products", await self._request("products", "GET", "/products"))

    async def list_channels(self) -> list[dict[str, Any]]:
        return self._expect_rows("channels", await self._request("channels", "GET", "/channels"))

    async def list_locations(self) -> list[dict[str, Any]]:
        return self._expect_rows("locations", await self._request("locations", "GET", "/locations"))

    # ── SavedSearchStore ─────────────────────────────────────────────

    async def list_all(self) -> list[SavedSearch]:
        data = await self._request("saved-searches", "GET", "/saved-searches")
        return [self._to_saved_search(item) for item in self._expect_rows("saved-searches", data)]

    async def create(self, name: str, query: str) -> SavedSearch:
        data = await self._request(
            "saved-searches",
            "POST",
            "/saved-searches",
            json={"name": name, "query": query},
        )
        # Some deployments answer the POST with an empty body.
        if not isinstance(data, dict) or not data:
            return SavedSearch(name=name, query=query)
        return self._to_saved_search(data)

    @staticmethod
    def _to_saved_search(raw: dict[str, Any]) -> SavedSearch:
        created_at = raw.get("created_at")
        if isinstance(created_at, str) and created_at:
            try:
                created_at = datetime.fromisoformat(created_at)
            except ValueError:
                created_at = None
        return SavedSearch(
            id=raw.get("id"),
            name=str(raw.get("name") or ""),
            query=str(raw.get("query") or ""),
            created_at=created_at or None,
        )
