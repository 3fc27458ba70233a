"""
Article routes: list, search, detail, read/saved operations.
"""

from fastapi import APIRouter, Depends, Query

from ..auth import verify_api_key
from ..schemas import (
    ArticleResponse,
    MarkAllReadRequest,
    MarkReadRequest,
    MarkSavedRequest,
)
from ..services import ArticleServiceDep

router = APIRouter(
    prefix="/articles",
    tags=["articles"],
    dependencies=[Depends(verify_api_key)]
)


# ─────────────────────────────────────────────────────────────
# List & Search (static paths first)
# ─────────────────────────────────────────────────────────────

@router.get("")
async def list_articles(
    service: ArticleServiceDep,
    feed_id: int | None = None,
    read: bool | None = None,
    saved: bool | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> list[ArticleResponse]:
    """Get articles, optionally filtered by feed, read or saved state."""
    articles = service.list_articles(
        feed_id=feed_id,
        read=read,
        saved=saved,
        limit=limit,
        offset=offset,
    )
    return [ArticleResponse.from_db(a) for a in articles]


@router.get("/search")
async def search_articles(
    q: str,
    service: ArticleServiceDep,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> list[ArticleResponse]:
    """Search article titles, content and authors."""
    return [ArticleResponse.from_db(a) for a in service.search(q, limit=limit, offset=offset)]


@router.post("/mark-all-read")
async def mark_all_read(request: MarkAllReadRequest, service: ArticleServiceDep) -> dict:
    """Mark every article (or every article in one feed) as read."""
    count = service.mark_all_read(request.feed_id)
    return {"success": True, "count": count}


# ─────────────────────────────────────────────────────────────
# Single Article
# ─────────────────────────────────────────────────────────────

@router.get("/{article_id}")
async def get_article(article_id: int, service: ArticleServiceDep) -> ArticleResponse:
    return ArticleResponse.from_db(service.get_article(article_id))


@router.put("/{article_id}/read")
async def mark_read(
    article_id: int,
    request: MarkReadRequest,
    service: ArticleServiceDep,
) -> ArticleResponse:
    return ArticleResponse.from_db(service.set_read(article_id, request.read))


@router.put("/{article_id}/save")
async def mark_saved(
    article_id: int,
    request: MarkSavedRequest,
    service: ArticleServiceDep,
) -> ArticleResponse:
    return ArticleResponse.from_db(service.set_saved(article_id, request.saved))
