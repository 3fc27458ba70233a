"""
Feed repository - CRUD operations for feeds.
"""

from datetime import datetime, timezone

from .connection import DatabaseConnection
from .converters import row_to_feed
from .models import DBFeed, FeedHealth


class FeedRepository:
    """Repository for feed operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        url: str,
        title: str,
        description: str | None = None,
        folder_id: int | None = None,
    ) -> int:
        """Add a new healthy feed. Returns feed ID."""
        now = datetime.now(timezone.utc).isoformat()
        with self._db.conn() as conn:
            cursor = conn.execute(
                """INSERT INTO feeds
                   (url, title, description, folder_id, created_at, updated_at, health, error_count)
                   VALUES (?, ?, ?, ?, ?, ?, ?, 0)""",
                (url, title, description, folder_id, now, now, FeedHealth.HEALTHY.value)
            )
            return cursor.lastrowid

    def get(self, feed_id: int) -> DBFeed | None:
        """Get single feed by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM feeds WHERE id = ?", (feed_id,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_by_url(self, url: str) -> DBFeed | None:
        """Get feed by its stored (canonical) URL."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM feeds WHERE url = ?", (url,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_all(self) -> list[DBFeed]:
        """Get all feeds ordered by title."""
        with self._db.conn() as conn:
            rows = conn.execute("SELECT * FROM feeds ORDER BY title").fetchall()
            return [row_to_feed(row) for row in rows]

    def get_in_folder(self, folder_id: int | None) -> list[DBFeed]:
        """Get feeds in a folder, or feeds without a folder when folder_id is None."""
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM feeds WHERE folder_id IS ? ORDER BY title",
                (folder_id,)
            ).fetchall()
            return [row_to_feed(row) for row in rows]

    def update_metadata_and_health(
        self,
        feed_id: int,
        title: str,
        description: str | None,
        health: FeedHealth,
        error_count: int,
        last_fetch: datetime,
    ):
        """Record the outcome of a fetch attempt. Returns False if the feed is gone."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                """UPDATE feeds SET
                   title = ?, description = ?, health = ?, error_count = ?,
                   last_fetch = ?, updated_at = ?
                   WHERE id = ?""",
                (title, description, health.value, error_count,
                 last_fetch.isoformat(), datetime.now(timezone.utc).isoformat(), feed_id)
            )
            return cursor.rowcount > 0

    def move_to_folder(self, feed_ids: list[int], folder_id: int | None) -> int:
        """Move feeds into a folder (None = no folder). Returns rows updated."""
        if not feed_ids:
            return 0
        placeholders = ",".join("?" * len(feed_ids))
        with self._db.conn() as conn:
            cursor = conn.execute(
                f"UPDATE feeds SET folder_id = ?, updated_at = ? WHERE id IN ({placeholders})",
                [folder_id, datetime.now(timezone.utc).isoformat(), *feed_ids]
            )
            return cursor.rowcount

    def delete(self, feed_id: int) -> bool:
        """Delete feed and (via cascade) its articles. Returns False if missing."""
        with self._db.conn() as conn:
            cursor = conn.execute("DELETE FROM feeds WHERE id = ?", (feed_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self._db.conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM feeds").fetchone()[0]
