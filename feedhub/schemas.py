"""
Pydantic models for API request/response validation.
"""

from pydantic import BaseModel, Field

from .database import DBArticle, DBFeed, DBFolder, FeedStats


# ─────────────────────────────────────────────────────────────
# Feed Schemas
# ─────────────────────────────────────────────────────────────

class FeedResponse(BaseModel):
    """Feed with health information."""
    id: int
    url: str
    title: str
    description: str | None
    folder_id: int | None
    created_at: str
    updated_at: str
    last_fetch: str | None
    health: str
    error_count: int

    @classmethod
    def from_db(cls, feed: DBFeed) -> "FeedResponse":
        return cls(
            id=feed.id,
            url=feed.url,
            title=feed.title,
            description=feed.description,
            folder_id=feed.folder_id,
            created_at=feed.created_at.isoformat(),
            updated_at=feed.updated_at.isoformat(),
            last_fetch=feed.last_fetch.isoformat() if feed.last_fetch else None,
            health=feed.health.value,
            error_count=feed.error_count,
        )


class FeedSummary(BaseModel):
    """Compact feed entry used inside folder trees."""
    id: int
    title: str
    url: str
    health: str
    error_count: int

    @classmethod
    def from_db(cls, feed: DBFeed) -> "FeedSummary":
        return cls(
            id=feed.id,
            title=feed.title,
            url=feed.url,
            health=feed.health.value,
            error_count=feed.error_count,
        )


class AddFeedRequest(BaseModel):
    """Request to subscribe to a feed."""
    url: str
    folder_id: int | None = Field(default=None, gt=0)


class RefreshResponse(BaseModel):
    """Result of a synchronous feed refresh."""
    feed_id: int
    entries_seen: int
    articles_added: int
    articles_skipped: int
    articles_failed: int


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

class ArticleResponse(BaseModel):
    """Article as returned by list, detail and search endpoints."""
    id: int
    feed_id: int
    title: str
    content: str | None
    url: str
    author: str
    published_at: str
    read: bool
    saved: bool
    created_at: str

    @classmethod
    def from_db(cls, article: DBArticle) -> "ArticleResponse":
        return cls(
            id=article.id,
            feed_id=article.feed_id,
            title=article.title,
            content=article.content,
            url=article.url,
            author=article.author,
            published_at=article.published_at.isoformat(),
            read=article.read,
            saved=article.saved,
            created_at=article.created_at.isoformat(),
        )


class MarkReadRequest(BaseModel):
    read: bool = True


class MarkSavedRequest(BaseModel):
    saved: bool = True


class MarkAllReadRequest(BaseModel):
    feed_id: int | None = Field(default=None, gt=0)


class StatsResponse(BaseModel):
    total_feeds: int
    total_articles: int
    unread_articles: int
    saved_articles: int

    @classmethod
    def from_stats(cls, stats: FeedStats) -> "StatsResponse":
        return cls(
            total_feeds=stats.total_feeds,
            total_articles=stats.total_articles,
            unread_articles=stats.unread_articles,
            saved_articles=stats.saved_articles,
        )


# ─────────────────────────────────────────────────────────────
# Folder Schemas
# ─────────────────────────────────────────────────────────────

class FolderResponse(BaseModel):
    id: int
    name: str
    parent_id: int | None
    position: int
    created_at: str

    @classmethod
    def from_db(cls, folder: DBFolder) -> "FolderResponse":
        return cls(
            id=folder.id,
            name=folder.name,
            parent_id=folder.parent_id,
            position=folder.position,
            created_at=folder.created_at.isoformat(),
        )


class FolderNode(FolderResponse):
    """Folder with its feeds and nested subfolders."""
    feeds: list[FeedSummary] = []
    children: list["FolderNode"] = []


FolderNode.model_rebuild()


class FolderTreeResponse(BaseModel):
    folders: list[FolderNode]
    uncategorized_feeds: list[FeedSummary]


class CreateFolderRequest(BaseModel):
    name: str
    parent_id: int | None = Field(default=None, gt=0)


class UpdateFolderRequest(BaseModel):
    name: str


class MoveFeedsRequest(BaseModel):
    """Move feeds into a folder; folder_id null moves them out of any folder."""
    feed_ids: list[int]
    folder_id: int | None = Field(default=None, gt=0)


# ─────────────────────────────────────────────────────────────
# OPML Schemas
# ─────────────────────────────────────────────────────────────

class OPMLImportRequest(BaseModel):
    opml_content: str


class OPMLImportResponse(BaseModel):
    total_feeds: int
    imported_feeds: int
    skipped_feeds: int
    errors: list[str] = []
