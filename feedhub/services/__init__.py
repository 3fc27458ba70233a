"""
Service layer for business logic.

Services encapsulate business logic, keeping routes as thin HTTP adapters.
Each service receives its dependencies via constructor injection.

Usage in routes:
    from ..services import FeedServiceDep

    @router.get("/feeds")
    async def list_feeds(service: FeedServiceDep):
        return service.list_feeds()
"""

from typing import Annotated

from fastapi import Depends

from ..config import get_db, get_engine
from ..database import Database
from ..ingestion import IngestionEngine

from .article_service import ArticleService
from .feed_service import FeedService
from .folder_service import FolderService

__all__ = [
    # Services
    "ArticleService",
    "FeedService",
    "FolderService",
    # Dependency factories
    "get_article_service",
    "get_feed_service",
    "get_folder_service",
    # Type aliases for dependency injection
    "ArticleServiceDep",
    "FeedServiceDep",
    "FolderServiceDep",
]


def get_article_service(db: Annotated[Database, Depends(get_db)]) -> ArticleService:
    """Dependency to get ArticleService instance."""
    return ArticleService(db=db)


def get_feed_service(
    db: Annotated[Database, Depends(get_db)],
    engine: Annotated[IngestionEngine, Depends(get_engine)],
) -> FeedService:
    """Dependency to get FeedService instance."""
    return FeedService(db=db, engine=engine)


def get_folder_service(db: Annotated[Database, Depends(get_db)]) -> FolderService:
    """Dependency to get FolderService instance."""
    return FolderService(db=db)


ArticleServiceDep = Annotated[ArticleService, Depends(get_article_service)]
FeedServiceDep = Annotated[FeedService, Depends(get_feed_service)]
FolderServiceDep = Annotated[FolderService, Depends(get_folder_service)]
