"""Application configuration — pydantic-settings, read from the environment and .env."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Demand Search API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:4200"]

    # Planning backend (search, history/forecast by keys, master data, saved searches)
    planning_api_base_url: str = "http://127.0.0.1:8000/api"
    planning_api_timeout: float = 30.0

    # Locale used to order table sorts ("" = take it from the environment)
    collation_locale: str = ""

    # Saved searches: "api" uses the planning backend, "database" the local table
    saved_search_backend: Literal["api", "database"] = "api"
    database_url: str = "sqlite:///data/demand_search.db"

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_screens: str = "INFO"          # screen controllers — search pipeline
    log_level_planning_api: str = "INFO"     # planning backend adapter

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        if not self.planning_api_base_url.strip():
            _config_logger.warning("PLANNING_API_BASE_URL is empty; backend calls will fail")
        object.__setattr__(self, "planning_api_base_url", self.planning_api_base_url.rstrip("/"))


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
