"""
Database row converters - convert SQLite rows to dataclasses.
"""

import sqlite3
from datetime import datetime, timezone

from .models import DBArticle, DBFeed, DBFolder, FeedHealth


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse a stored timestamp, treating naive values as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_required_timestamp(value: str | None) -> datetime:
    return _parse_timestamp(value) or datetime.now(timezone.utc)


def row_to_feed(row: sqlite3.Row) -> DBFeed:
    """Convert a database row to a DBFeed."""
    try:
        health = FeedHealth(row["health"])
    except ValueError:
        health = FeedHealth.from_error_count(row["error_count"] or 0)

    return DBFeed(
        id=row["id"],
        url=row["url"],
        title=row["title"],
        description=row["description"],
        folder_id=row["folder_id"],
        created_at=_parse_required_timestamp(row["created_at"]),
        updated_at=_parse_required_timestamp(row["updated_at"]),
        last_fetch=_parse_timestamp(row["last_fetch"]),
        health=health,
        error_count=row["error_count"] or 0,
    )


def row_to_article(row: sqlite3.Row) -> DBArticle:
    """Convert a database row to a DBArticle."""
    return DBArticle(
        id=row["id"],
        feed_id=row["feed_id"],
        title=row["title"],
        content=row["content"],
        url=row["url"],
        author=row["author"] or "",
        published_at=_parse_required_timestamp(row["published_at"]),
        read=bool(row["read"]),
        saved=bool(row["saved"]),
        created_at=_parse_required_timestamp(row["created_at"]),
    )


def row_to_folder(row: sqlite3.Row) -> DBFolder:
    """Convert a database row to a DBFolder."""
    return DBFolder(
        id=row["id"],
        name=row["name"],
        parent_id=row["parent_id"],
        position=row["position"] or 0,
        created_at=_parse_required_timestamp(row["created_at"]),
    )
