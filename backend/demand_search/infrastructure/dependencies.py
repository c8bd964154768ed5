"""FastAPI dependency injection — wires infrastructure to application layer."""

import logging
from collections.abc import AsyncGenerator
from functools import lru_cache

import httpx
from fastapi import Depends

from demand_search.application.interfaces import SavedSearchStore
from demand_search.application.services import (
    QueryBuilderService,
    ScreenController,
    build_screens,
)
from demand_search.config import get_settings
from demand_search.domain.entities import Domain
from demand_search.infrastructure.database.repositories import SQLAlchemySavedSearchRepository
from demand_search.infrastructure.database.session import get_session_factory
from demand_search.infrastructure.planning_api import PlanningApiClient

logger = logging.getLogger(__name__)


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    """Shared connection pool for every planning backend call."""
    settings = get_settings()
    return httpx.AsyncClient(timeout=settings.planning_api_timeout)


async def close_http_client() -> None:
    """Close the shared client at shutdown; the next call opens a fresh one."""
    if get_http_client.cache_info().currsize:
        await get_http_client().aclose()
        get_http_client.cache_clear()


@lru_cache
def get_planning_client() -> PlanningApiClient:
    settings = get_settings()
    return PlanningApiClient(
        settings.planning_api_base_url,
        timeout=settings.planning_api_timeout,
        http_client=get_http_client(),
    )


@lru_cache
def get_screen_registry() -> dict[str, ScreenController]:
    """One controller per screen, living as long as the process.

    Screens hold view state between requests (rows, filters, page), which
    assumes a single planner per running instance.
    """
    client = get_planning_client()
    screens = build_screens(
        search_client=client,
        detail_client=client,
        master_loaders={
            Domain.PRODUCT: client.list_products,
            Domain.CHANNEL: client.list_channels,
            Domain.LOCATION: client.list_locations,
        },
    )
    logger.info("Screen registry ready: %s", ", ".join(screens))
    return screens


async def get_saved_search_store() -> AsyncGenerator[SavedSearchStore, None]:
    """Provides the configured saved-search store (planning backend or local table)."""
    settings = get_settings()
    if settings.saved_search_backend != "database":
        yield get_planning_client()
        return

    async with get_session_factory()() as session:
        try:
            yield SQLAlchemySavedSearchRepository(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_query_builder_service(
    store: SavedSearchStore = Depends(get_saved_search_store),
) -> AsyncGenerator[QueryBuilderService, None]:
    """Provides a QueryBuilderService wired to the master data and saved-search store."""
    yield QueryBuilderService(get_planning_client(), store)
