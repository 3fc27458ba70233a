"""
Database models - dataclasses for database entities.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class FeedHealth(str, Enum):
    """Fetch reliability of a feed, derived from its consecutive error count."""
    HEALTHY = "healthy"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def from_error_count(cls, error_count: int) -> "FeedHealth":
        if error_count >= 3:
            return cls.ERROR
        if error_count >= 1:
            return cls.WARNING
        return cls.HEALTHY


@dataclass
class DBFeed:
    id: int
    url: str
    title: str
    description: str | None
    folder_id: int | None
    created_at: datetime
    updated_at: datetime
    last_fetch: datetime | None
    health: FeedHealth = FeedHealth.HEALTHY
    error_count: int = 0


@dataclass
class DBArticle:
    id: int
    feed_id: int
    title: str
    content: str | None
    url: str
    author: str
    published_at: datetime
    read: bool
    saved: bool
    created_at: datetime


@dataclass
class DBFolder:
    id: int
    name: str
    parent_id: int | None
    position: int
    created_at: datetime


@dataclass
class FeedStats:
    total_feeds: int
    total_articles: int
    unread_articles: int
    saved_articles: int
