"""
Feed service: business logic for feed management operations.

Handles subscription, refresh, deletion and OPML import/export. Ingestion
itself lives in IngestionEngine; this layer adapts it for the routes.
"""

import logging

from ..database import Database, DBFeed
from ..exceptions import DuplicateFeedError, FeedHubError, ValidationError, require_feed
from ..ingestion import IngestionEngine, RefreshResult
from ..opml import OPMLDocument, OPMLFeed, OPMLFolder, generate_opml, parse_opml
from ..schemas import OPMLImportResponse

logger = logging.getLogger(__name__)


class FeedService:
    """Service for feed-related business logic."""

    def __init__(self, db: Database, engine: IngestionEngine):
        self.db = db
        self.engine = engine

    # ─────────────────────────────────────────────────────────────
    # Feed Management
    # ─────────────────────────────────────────────────────────────

    def list_feeds(self) -> list[DBFeed]:
        return self.db.get_feeds()

    def get_feed(self, feed_id: int) -> DBFeed:
        return require_feed(self.db.get_feed(feed_id))

    async def subscribe(self, url: str, folder_id: int | None = None) -> DBFeed:
        """Subscribe to a new feed; articles are fetched in the background."""
        return await self.engine.add_subscription(url, folder_id)

    async def refresh_feed(self, feed_id: int) -> RefreshResult:
        """Refresh one feed now, waiting for the result."""
        return await self.engine.refresh(feed_id)

    def unsubscribe(self, feed_id: int) -> None:
        self.engine.delete_feed(feed_id)

    # ─────────────────────────────────────────────────────────────
    # OPML Import/Export
    # ─────────────────────────────────────────────────────────────

    async def import_opml(self, opml_content: str) -> OPMLImportResponse:
        """
        Import feeds and folders from OPML content.

        Folders are created (or reused when a sibling with the same name
        exists); every feed goes through the normal subscription path.

        Raises:
            ValidationError: If the OPML is invalid
        """
        try:
            doc = parse_opml(opml_content)
        except ValueError as e:
            raise ValidationError(f"Invalid OPML: {e}")

        result = OPMLImportResponse(total_feeds=0, imported_feeds=0, skipped_feeds=0, errors=[])
        await self._import_folder(doc.root, None, result)

        logger.info(
            f"OPML import completed: {result.total_feeds} total, "
            f"{result.imported_feeds} imported, {result.skipped_feeds} skipped"
        )
        return result

    async def _import_folder(
        self,
        folder: OPMLFolder,
        folder_id: int | None,
        result: OPMLImportResponse,
    ) -> None:
        for opml_feed in folder.feeds:
            await self._import_single_feed(opml_feed, folder_id, result)

        for child in folder.children:
            existing = self.db.folders.find_sibling(child.name, folder_id)
            if existing:
                child_id = existing.id
            else:
                child_id = self.db.folders.add(child.name, folder_id)
                logger.info(f"Created folder: {child.name}")
            await self._import_folder(child, child_id, result)

    async def _import_single_feed(
        self,
        opml_feed: OPMLFeed,
        folder_id: int | None,
        result: OPMLImportResponse,
    ) -> None:
        result.total_feeds += 1

        if self.db.get_feed_by_url(opml_feed.url):
            result.skipped_feeds += 1
            logger.info(f"Skipping existing feed: {opml_feed.url}")
            return

        try:
            await self.engine.add_subscription(opml_feed.url, folder_id)
        except DuplicateFeedError:
            result.skipped_feeds += 1
            logger.info(f"Skipping existing feed: {opml_feed.url}")
        except FeedHubError as e:
            result.errors.append(f"Failed to add feed {opml_feed.url}: {e.message}")
            logger.warning(f"Failed to add feed {opml_feed.url}: {e.message}")
        else:
            result.imported_feeds += 1
            logger.info(f"Imported feed: {opml_feed.url}")

    def export_opml(self, title: str = "FeedHub Export") -> str:
        """Export all folders and feeds as an OPML document."""
        return generate_opml(self._build_opml_tree().root, title=title)

    def _build_opml_tree(self) -> OPMLDocument:
        folders = self.db.get_folders()
        nodes = {f.id: OPMLFolder(name=f.name) for f in folders}
        root = OPMLFolder(name="")

        for folder in folders:
            parent = nodes.get(folder.parent_id) if folder.parent_id else None
            (parent or root).children.append(nodes[folder.id])

        for feed in self.db.get_feeds():
            target = nodes.get(feed.folder_id, root) if feed.folder_id else root
            target.feeds.append(OPMLFeed(
                url=feed.url,
                title=feed.title,
                description=feed.description,
            ))

        return OPMLDocument(title=None, root=root)
