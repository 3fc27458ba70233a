"""
Database facade - provides unified access to all repositories.

Callers either use the repositories directly (``db.feeds``, ``db.articles``,
``db.folders``) or the delegating shortcuts below.
"""

from datetime import datetime
from pathlib import Path

from .connection import DatabaseConnection
from .article_repository import ArticleRepository
from .feed_repository import FeedRepository
from .folder_repository import FolderRepository
from .models import DBArticle, DBFeed, DBFolder, FeedHealth, FeedStats


class Database:
    """Unified database access facade."""

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        # Initialize repositories
        self.articles = ArticleRepository(self._connection)
        self.feeds = FeedRepository(self._connection)
        self.folders = FolderRepository(self._connection)

    # ─────────────────────────────────────────────────────────────
    # Feed operations (delegated to FeedRepository)
    # ─────────────────────────────────────────────────────────────

    def add_feed(
        self,
        url: str,
        title: str,
        description: str | None = None,
        folder_id: int | None = None,
    ) -> int:
        return self.feeds.add(url, title, description, folder_id)

    def get_feed(self, feed_id: int) -> DBFeed | None:
        return self.feeds.get(feed_id)

    def get_feed_by_url(self, url: str) -> DBFeed | None:
        return self.feeds.get_by_url(url)

    def get_feeds(self) -> list[DBFeed]:
        return self.feeds.get_all()

    def update_feed_health(
        self,
        feed_id: int,
        title: str,
        description: str | None,
        health: FeedHealth,
        error_count: int,
        last_fetch: datetime,
    ) -> bool:
        return self.feeds.update_metadata_and_health(
            feed_id, title, description, health, error_count, last_fetch
        )

    def delete_feed(self, feed_id: int) -> bool:
        return self.feeds.delete(feed_id)

    # ─────────────────────────────────────────────────────────────
    # Article operations (delegated to ArticleRepository)
    # ─────────────────────────────────────────────────────────────

    def article_exists(self, feed_id: int, url: str) -> bool:
        return self.articles.exists_by_feed_and_link(feed_id, url)

    def add_article(
        self,
        feed_id: int,
        url: str,
        title: str,
        content: str | None,
        author: str,
        published_at: datetime,
    ) -> int | None:
        return self.articles.add(feed_id, url, title, content, author, published_at)

    def get_article(self, article_id: int) -> DBArticle | None:
        return self.articles.get(article_id)

    def get_articles(
        self,
        feed_id: int | None = None,
        read: bool | None = None,
        saved: bool | None = None,
        limit: int = 50,
        offset: int = 0
    ) -> list[DBArticle]:
        return self.articles.get_many(feed_id, read, saved, limit, offset)

    def search(self, query: str, limit: int = 50, offset: int = 0) -> list[DBArticle]:
        return self.articles.search(query, limit, offset)

    def get_stats(self) -> FeedStats:
        return self.articles.stats(total_feeds=self.feeds.count())

    # ─────────────────────────────────────────────────────────────
    # Folder operations (delegated to FolderRepository)
    # ─────────────────────────────────────────────────────────────

    def get_folder(self, folder_id: int) -> DBFolder | None:
        return self.folders.get(folder_id)

    def get_folders(self) -> list[DBFolder]:
        return self.folders.get_all()
