"""
Article repository - CRUD operations for articles.
"""

from datetime import datetime, timedelta, timezone

from .connection import DatabaseConnection
from .converters import row_to_article
from .models import DBArticle, FeedStats


class ArticleRepository:
    """Repository for article operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def exists_by_feed_and_link(self, feed_id: int, url: str) -> bool:
        """Check the (feed, link) dedup key."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT 1 FROM articles WHERE feed_id = ? AND url = ? LIMIT 1",
                (feed_id, url)
            ).fetchone()
            return row is not None

    def add(
        self,
        feed_id: int,
        url: str,
        title: str,
        content: str | None,
        author: str,
        published_at: datetime,
    ) -> int | None:
        """
        Insert an article unless one with the same (feed, link) exists.

        Returns the new article ID, or None if the row already existed.
        Existing rows are never modified.
        """
        with self._db.conn() as conn:
            cursor = conn.execute(
                """INSERT OR IGNORE INTO articles
                   (feed_id, url, title, content, author, published_at, read, saved, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, FALSE, FALSE, ?)""",
                (feed_id, url, title, content, author,
                 published_at.isoformat(), datetime.now(timezone.utc).isoformat())
            )
            if cursor.rowcount == 0:
                return None
            return cursor.lastrowid

    def get(self, article_id: int) -> DBArticle | None:
        """Get single article by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM articles WHERE id = ?", (article_id,)
            ).fetchone()
            return row_to_article(row) if row else None

    def get_many(
        self,
        feed_id: int | None = None,
        read: bool | None = None,
        saved: bool | None = None,
        limit: int = 50,
        offset: int = 0
    ) -> list[DBArticle]:
        """Get articles with optional filters, newest first."""
        query = "SELECT * FROM articles WHERE 1=1"
        params: list = []

        if feed_id is not None:
            query += " AND feed_id = ?"
            params.append(feed_id)
        if read is not None:
            query += " AND read = ?"
            params.append(read)
        if saved is not None:
            query += " AND saved = ?"
            params.append(saved)

        query += " ORDER BY published_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with self._db.conn() as conn:
            rows = conn.execute(query, params).fetchall()
            return [row_to_article(row) for row in rows]

    def search(self, query: str, limit: int = 50, offset: int = 0) -> list[DBArticle]:
        """Case-insensitive substring search over title, content and author."""
        pattern = f"%{query.lower()}%"
        with self._db.conn() as conn:
            rows = conn.execute(
                """SELECT * FROM articles
                   WHERE LOWER(title) LIKE ? OR LOWER(content) LIKE ? OR LOWER(author) LIKE ?
                   ORDER BY published_at DESC, id DESC
                   LIMIT ? OFFSET ?""",
                (pattern, pattern, pattern, limit, offset)
            ).fetchall()
            return [row_to_article(row) for row in rows]

    def count_for_feed(self, feed_id: int) -> int:
        with self._db.conn() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM articles WHERE feed_id = ?", (feed_id,)
            ).fetchone()[0]

    def mark_read(self, article_id: int, read: bool = True) -> bool:
        """Mark article as read/unread. Returns False if missing."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "UPDATE articles SET read = ? WHERE id = ?", (read, article_id)
            )
            return cursor.rowcount > 0

    def mark_saved(self, article_id: int, saved: bool = True) -> bool:
        """Mark article as saved/unsaved. Returns False if missing."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "UPDATE articles SET saved = ? WHERE id = ?", (saved, article_id)
            )
            return cursor.rowcount > 0

    def mark_all_read(self, feed_id: int | None = None) -> int:
        """Mark all articles (optionally in one feed) as read. Returns count."""
        query = "UPDATE articles SET read = TRUE WHERE read = FALSE"
        params: list = []
        if feed_id is not None:
            query += " AND feed_id = ?"
            params.append(feed_id)
        with self._db.conn() as conn:
            return conn.execute(query, params).rowcount

    def stats(self, total_feeds: int) -> FeedStats:
        with self._db.conn() as conn:
            row = conn.execute(
                """SELECT COUNT(*) AS total,
                          COALESCE(SUM(CASE WHEN read = FALSE THEN 1 ELSE 0 END), 0) AS unread,
                          COALESCE(SUM(CASE WHEN saved = TRUE THEN 1 ELSE 0 END), 0) AS saved
                   FROM articles"""
            ).fetchone()
            return FeedStats(
                total_feeds=total_feeds,
                total_articles=row["total"],
                unread_articles=row["unread"],
                saved_articles=row["saved"],
            )

    def delete_older_than(self, days: int) -> int:
        """Delete read, unsaved articles created more than `days` ago."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        with self._db.conn() as conn:
            cursor = conn.execute(
                """DELETE FROM articles
                   WHERE read = TRUE AND saved = FALSE AND created_at < ?""",
                (cutoff.isoformat(),)
            )
            return cursor.rowcount
