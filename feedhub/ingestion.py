"""
Ingestion engine: subscription, refresh and deletion of feeds.

Refresh is the central state machine. Every fetch attempt rewrites the
feed's health fields: a success resets the error count, a failure bumps it
and derives health from the new count. On success the entries are ingested
insert-if-absent on (feed_id, link), so re-running a refresh on an unchanged
document is a no-op.
"""

import asyncio
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from .database import Database, DBFeed, FeedHealth
from .exceptions import (
    DuplicateFeedError,
    FetchError,
    ValidationError,
    require_feed,
    require_folder,
)
from .feed_parser import FeedEntry, ParsedFeed
from .tasks import TaskRunner

if TYPE_CHECKING:
    from .feed_parser import FeedParser
    from .url_resolver import URLResolver

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """Outcome of one successful refresh."""
    feed_id: int
    entries_seen: int = 0
    articles_added: int = 0
    articles_skipped: int = 0
    articles_failed: int = 0


class IngestionEngine:
    """Orchestrates resolve -> fetch -> register -> ingest -> health update."""

    def __init__(
        self,
        db: Database,
        feed_parser: "FeedParser",
        resolver: "URLResolver",
        runner: TaskRunner,
    ):
        self.db = db
        self.feed_parser = feed_parser
        self.resolver = resolver
        self.runner = runner
        self._inflight: dict[int, asyncio.Task] = {}

    # ─────────────────────────────────────────────────────────────
    # Subscription
    # ─────────────────────────────────────────────────────────────

    async def add_subscription(self, raw_url: str, folder_id: int | None = None) -> DBFeed:
        """
        Register a new feed and schedule its first refresh.

        Registration is all-or-nothing: every failure is raised and nothing is
        stored. The returned feed has no articles yet; they arrive when the
        background refresh completes.

        Raises:
            ValidationError, NotFoundError, ResolutionError, FetchError,
            DuplicateFeedError
        """
        raw_url = (raw_url or "").strip()
        if not raw_url:
            raise ValidationError("feed URL cannot be empty")

        if folder_id is not None:
            require_folder(self.db.get_folder(folder_id))

        canonical_url = await self.resolver.resolve(raw_url)

        try:
            parsed = await self.feed_parser.fetch(canonical_url)
        except FetchError as e:
            raise FetchError(f"failed to parse feed: {e.message}") from e

        if self.db.get_feed_by_url(canonical_url) is not None:
            raise DuplicateFeedError("feed already exists")
        if raw_url != canonical_url and self.db.get_feed_by_url(raw_url) is not None:
            raise DuplicateFeedError("feed already exists")

        try:
            feed_id = self.db.add_feed(
                canonical_url, parsed.title, parsed.description, folder_id
            )
        except sqlite3.IntegrityError as e:
            # Lost a race with a concurrent add of the same URL
            raise DuplicateFeedError("feed already exists") from e

        logger.info(f"Subscribed to {canonical_url} (feed {feed_id})")
        self.runner.submit(self.refresh(feed_id), name=f"refresh-feed-{feed_id}")

        return require_feed(self.db.get_feed(feed_id))

    def delete_feed(self, feed_id: int):
        """Delete a feed and its articles. Raises NotFoundError."""
        if not self.db.delete_feed(feed_id):
            require_feed(None)
        logger.info(f"Deleted feed {feed_id}")

    # ─────────────────────────────────────────────────────────────
    # Refresh
    # ─────────────────────────────────────────────────────────────

    async def refresh(self, feed_id: int) -> RefreshResult:
        """
        Fetch a feed, update its health and ingest new entries.

        Concurrent calls for the same feed share one in-flight refresh
        and all receive its result or exception.

        Raises:
            NotFoundError: unknown feed id
            FetchError: the document could not be fetched (health already updated)
        """
        task = self._inflight.get(feed_id)
        if task is None:
            task = self.runner.submit(self._refresh(feed_id), name=f"refresh-{feed_id}-shared")
            self._inflight[feed_id] = task
            # Covers a task cancelled before its body ever ran
            task.add_done_callback(lambda done: self._forget(feed_id, done))
        return await asyncio.shield(task)

    def _forget(self, feed_id: int, task: asyncio.Task):
        if self._inflight.get(feed_id) is task:
            del self._inflight[feed_id]

    async def _refresh(self, feed_id: int) -> RefreshResult:
        try:
            return await self._fetch_and_ingest(feed_id)
        finally:
            # Drop the entry before the task completes so a later call starts a new fetch
            self._forget(feed_id, asyncio.current_task())

    async def _fetch_and_ingest(self, feed_id: int) -> RefreshResult:
        feed = require_feed(self.db.get_feed(feed_id))
        logger.info(f"Refreshing feed: {feed.title}")

        try:
            parsed = await self.feed_parser.fetch(feed.url)
        except FetchError as e:
            self._record_failure(feed, e)
            raise

        updated = self.db.update_feed_health(
            feed_id,
            title=parsed.title,
            description=parsed.description,
            health=FeedHealth.HEALTHY,
            error_count=0,
            last_fetch=datetime.now(timezone.utc),
        )
        if not updated:
            logger.info(f"Feed {feed_id} was deleted during refresh, skipping ingestion")
            return RefreshResult(feed_id=feed_id, entries_seen=len(parsed.entries))

        result = self._ingest_entries(feed_id, parsed)
        logger.info(
            f"Refreshed feed {feed.title}: {result.articles_added} new, "
            f"{result.articles_skipped} existing, {result.articles_failed} failed"
        )
        return result

    def _record_failure(self, feed: DBFeed, error: FetchError):
        error_count = feed.error_count + 1
        health = FeedHealth.from_error_count(error_count)
        try:
            self.db.update_feed_health(
                feed.id,
                title=feed.title,
                description=feed.description,
                health=health,
                error_count=error_count,
                last_fetch=datetime.now(timezone.utc),
            )
        except sqlite3.Error as e:
            logger.error(f"Failed to update feed {feed.id} error status: {e}")
        logger.warning(f"Feed {feed.id} error ({error_count} consecutive, {health.value}): {error}")

    def _ingest_entries(self, feed_id: int, parsed: ParsedFeed) -> RefreshResult:
        result = RefreshResult(feed_id=feed_id, entries_seen=len(parsed.entries))

        for entry in parsed.entries:
            if not entry.link:
                logger.debug(f"Skipping entry without link in feed {feed_id}: {entry.title}")
                result.articles_skipped += 1
                continue

            try:
                added = self._add_entry(feed_id, entry)
            except Exception as e:
                logger.error(f"Failed to add article {entry.title!r} to feed {feed_id}: {e}")
                result.articles_failed += 1
                continue

            if added:
                result.articles_added += 1
            else:
                result.articles_skipped += 1

        return result

    def _add_entry(self, feed_id: int, entry: FeedEntry) -> bool:
        """Insert one entry if its (feed, link) key is new. Returns True if inserted."""
        if self.db.article_exists(feed_id, entry.link):
            return False

        article_id = self.db.add_article(
            feed_id=feed_id,
            url=entry.link,
            title=entry.title,
            content=entry.content or entry.summary,
            author=entry.author or "",
            published_at=entry.published or datetime.now(timezone.utc),
        )
        return article_id is not None
