"""
Feed Refresh Scheduler.

Background loop that periodically refreshes every registered feed and
prunes old articles.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .database import Database
    from .ingestion import IngestionEngine
    from .tasks import TaskRunner


logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Background scheduler for feed refresh sweeps.

    Every tick launches one refresh per feed, all at once, through the task
    runner. A failing feed only affects its own task; the sweep itself never
    raises. Once a day the sweep also deletes read, unsaved articles older
    than the retention period.
    """

    def __init__(
        self,
        engine: "IngestionEngine",
        db: "Database",
        runner: "TaskRunner",
        interval_minutes: int = 15,
        retention_days: int = 30,
        cleanup_interval: timedelta = timedelta(days=1),
        initial_delay: float = 10,
    ):
        self.engine = engine
        self.db = db
        self.runner = runner
        self.interval_minutes = interval_minutes
        self.retention_days = retention_days
        self.cleanup_interval = cleanup_interval
        self.initial_delay = initial_delay
        self._task: asyncio.Task | None = None
        self._running = False
        self._last_cleanup: datetime | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the refresh loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"Feed refresh scheduler started (interval: {self.interval_minutes} minutes)")

    async def stop(self):
        """Stop the refresh loop. In-flight refreshes are left to the task runner."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Feed refresh scheduler stopped")

    async def _poll_loop(self):
        """Main scheduling loop."""
        # Initial delay to let the server fully start
        await asyncio.sleep(self.initial_delay)

        while self._running:
            try:
                self.sweep()
                self.cleanup_if_due()
            except Exception as e:
                logger.exception(f"Error in feed refresh loop: {e}")

            await asyncio.sleep(self.interval_minutes * 60)

    def sweep(self) -> list[asyncio.Task]:
        """Submit a refresh for every feed. Returns the submitted tasks."""
        logger.info("Starting scheduled feed refresh...")
        feeds = self.db.get_feeds()
        tasks = [
            self.runner.submit(self.engine.refresh(feed.id), name=f"refresh-feed-{feed.id}")
            for feed in feeds
        ]
        logger.info(f"Started refresh for {len(tasks)} feeds")
        return tasks

    def cleanup_if_due(self) -> int | None:
        """Run article retention cleanup if the cleanup interval has elapsed."""
        now = datetime.now(timezone.utc)
        if self._last_cleanup is not None and now - self._last_cleanup < self.cleanup_interval:
            return None
        self._last_cleanup = now

        removed = self.db.articles.delete_older_than(self.retention_days)
        if removed > 0:
            logger.info(f"Cleaned up {removed} old articles")
        return removed
