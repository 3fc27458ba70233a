"""
Configuration and application state management.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from .exceptions import ServiceUnavailableError

if TYPE_CHECKING:
    from .database import Database
    from .feed_parser import FeedParser
    from .ingestion import IngestionEngine
    from .scheduler import RefreshScheduler
    from .tasks import TaskRunner
    from .url_resolver import URLResolver

# Load environment variables
load_dotenv()


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


class Config:
    """Application configuration from environment."""
    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/feedhub.db"))
    PORT: int = int(os.getenv("PORT", "8080"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Leave empty to disable authentication (local development)
    AUTH_API_KEY: str = os.getenv("AUTH_API_KEY", "")

    # Ingestion
    REFRESH_INTERVAL_MINUTES: int = int(os.getenv("REFRESH_INTERVAL_MINUTES", "15"))
    FEED_FETCH_TIMEOUT: int = int(os.getenv("FEED_FETCH_TIMEOUT", "30"))  # seconds
    PAGE_FETCH_TIMEOUT: int = int(os.getenv("PAGE_FETCH_TIMEOUT", "10"))  # seconds
    USER_AGENT: str = os.getenv("USER_AGENT", "FeedHub/1.0 (+https://github.com/feedhub)")
    ENABLE_SCHEDULER: bool = _parse_bool(os.getenv("ENABLE_SCHEDULER"), default=True)

    # Read, unsaved articles older than this are removed by the daily cleanup
    ARTICLE_RETENTION_DAYS: int = int(os.getenv("ARTICLE_RETENTION_DAYS", "30"))


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    feed_parser: "FeedParser | None" = None
    resolver: "URLResolver | None" = None
    runner: "TaskRunner | None" = None
    engine: "IngestionEngine | None" = None
    scheduler: "RefreshScheduler | None" = None


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise ServiceUnavailableError("Database not initialized")
    return state.db


def get_engine() -> "IngestionEngine":
    """Dependency to get the ingestion engine."""
    if not state.engine:
        raise ServiceUnavailableError("Ingestion engine not initialized")
    return state.engine
