"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from demand_search.application.services import configure_collation
from demand_search.config import get_settings
from demand_search.infrastructure.database import Base, get_engine
from demand_search.infrastructure.dependencies import close_http_client
from demand_search.infrastructure.logging.log_config import setup_logging
from demand_search.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-based SQLite database."""
    prefix = "sqlite:///"
    if not database_url.startswith(prefix):
        return
    path = database_url[len(prefix):]
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, create tables, close clients."""
    settings = get_settings()
    setup_logging()
    configure_collation(settings.collation_locale)
    logger.info(
        "Starting %s %s (planning API %s, saved searches via %s)",
        settings.app_title,
        settings.app_version,
        settings.planning_api_base_url,
        settings.saved_search_backend,
    )

    use_database = settings.saved_search_backend == "database"
    if use_database:
        _ensure_sqlite_directory(settings.database_url)
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    yield

    # Shutdown
    await close_http_client()
    if use_database:
        await get_engine().dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "demand_search.main:app",
        host="0.0.0.0",
        port=8030,
        reload=True,
    )
