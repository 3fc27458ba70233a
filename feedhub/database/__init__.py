"""
Database module - SQLite operations for feeds, articles and folders.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import DBArticle, DBFeed, DBFolder, FeedHealth, FeedStats
from .article_repository import ArticleRepository
from .feed_repository import FeedRepository
from .folder_repository import FolderRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBArticle",
    "DBFeed",
    "DBFolder",
    "FeedHealth",
    "FeedStats",
    "ArticleRepository",
    "FeedRepository",
    "FolderRepository",
]
