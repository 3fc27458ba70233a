"""
Article service: listing, search, read/saved state, and stats.
"""

from ..database import Database, DBArticle, FeedStats
from ..exceptions import ValidationError, require_article, require_feed

MIN_QUERY_LENGTH = 2


class ArticleService:
    """Service for article-related business logic."""

    def __init__(self, db: Database):
        self.db = db

    def list_articles(
        self,
        feed_id: int | None = None,
        read: bool | None = None,
        saved: bool | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DBArticle]:
        """
        List articles newest first.

        Args:
            feed_id: Only articles from this feed
            read: True/False to filter by read state, None for all
            saved: True/False to filter by saved state, None for all
            limit: Page size
            offset: Number of articles to skip
        """
        return self.db.get_articles(feed_id, read, saved, limit, offset)

    def get_article(self, article_id: int) -> DBArticle:
        return require_article(self.db.get_article(article_id))

    def set_read(self, article_id: int, read: bool) -> DBArticle:
        require_article(self.db.get_article(article_id))
        self.db.articles.mark_read(article_id, read)
        return self.get_article(article_id)

    def set_saved(self, article_id: int, saved: bool) -> DBArticle:
        require_article(self.db.get_article(article_id))
        self.db.articles.mark_saved(article_id, saved)
        return self.get_article(article_id)

    def mark_all_read(self, feed_id: int | None = None) -> int:
        if feed_id is not None:
            require_feed(self.db.get_feed(feed_id))
        return self.db.articles.mark_all_read(feed_id)

    def search(self, query: str, limit: int = 50, offset: int = 0) -> list[DBArticle]:
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise ValidationError("Query too short")
        return self.db.search(query, limit=limit, offset=offset)

    def stats(self) -> FeedStats:
        return self.db.get_stats()
