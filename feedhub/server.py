"""
Feed Hub API Server

FastAPI application providing endpoints for:
- Feed management (subscribe, refresh, remove) with health tracking
- Articles (list, read/save, search)
- Folders and OPML import/export
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import config, state
from .database import Database
from .exceptions import FeedHubError, feedhub_error_handler
from .feed_parser import FeedParser
from .ingestion import IngestionEngine
from .routes import (
    articles_router,
    feeds_router,
    folders_router,
    misc_public_router,
    misc_router,
    opml_router,
)
from .scheduler import RefreshScheduler
from .tasks import TaskRunner
from .url_resolver import URLResolver

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup application resources."""
    # Startup - skip if already initialized (e.g., by tests)
    if state.db is None:
        state.db = Database(config.DB_PATH)
        logger.info(f"Database initialized at {config.DB_PATH}")
    if state.runner is None:
        state.runner = TaskRunner()
    if state.feed_parser is None:
        state.feed_parser = FeedParser(
            timeout=config.FEED_FETCH_TIMEOUT,
            user_agent=config.USER_AGENT,
        )
    if state.resolver is None:
        state.resolver = URLResolver(
            timeout=config.PAGE_FETCH_TIMEOUT,
            user_agent=config.USER_AGENT,
        )
    if state.engine is None:
        state.engine = IngestionEngine(
            db=state.db,
            feed_parser=state.feed_parser,
            resolver=state.resolver,
            runner=state.runner,
        )

    started_scheduler = False
    if config.ENABLE_SCHEDULER and state.scheduler is None:
        state.scheduler = RefreshScheduler(
            engine=state.engine,
            db=state.db,
            runner=state.runner,
            interval_minutes=config.REFRESH_INTERVAL_MINUTES,
            retention_days=config.ARTICLE_RETENTION_DAYS,
        )
        await state.scheduler.start()
        started_scheduler = True

    yield

    # Shutdown
    if started_scheduler and state.scheduler:
        await state.scheduler.stop()
        state.scheduler = None
    if state.runner:
        await state.runner.shutdown()


app = FastAPI(
    title="Feed Hub API",
    version=__version__,
    lifespan=lifespan
)

app.add_exception_handler(FeedHubError, feedhub_error_handler)

# Include routers
app.include_router(misc_public_router)
app.include_router(misc_router)
app.include_router(feeds_router)
app.include_router(articles_router)
app.include_router(folders_router)
app.include_router(opml_router)


def main():
    """Run the API server."""
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
