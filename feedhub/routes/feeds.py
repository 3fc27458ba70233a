"""
Feed routes: subscribe, list, refresh, delete.
"""

from fastapi import APIRouter, Depends, status

from ..auth import verify_api_key
from ..schemas import AddFeedRequest, FeedResponse, RefreshResponse
from ..services import FeedServiceDep

router = APIRouter(
    prefix="/feeds",
    tags=["feeds"],
    dependencies=[Depends(verify_api_key)]
)


@router.get("")
async def list_feeds(service: FeedServiceDep) -> list[FeedResponse]:
    """List all subscribed feeds with their health."""
    return [FeedResponse.from_db(f) for f in service.list_feeds()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_feed(request: AddFeedRequest, service: FeedServiceDep) -> FeedResponse:
    """
    Subscribe to a new feed.

    The feed is validated by fetching it once; its articles are fetched in
    the background, so the response arrives before they exist.
    """
    feed = await service.subscribe(request.url, request.folder_id)
    return FeedResponse.from_db(feed)


@router.get("/{feed_id}")
async def get_feed(feed_id: int, service: FeedServiceDep) -> FeedResponse:
    return FeedResponse.from_db(service.get_feed(feed_id))


@router.post("/{feed_id}/refresh")
async def refresh_feed(feed_id: int, service: FeedServiceDep) -> RefreshResponse:
    """Refresh a specific feed and report how many articles were added."""
    result = await service.refresh_feed(feed_id)
    return RefreshResponse(
        feed_id=result.feed_id,
        entries_seen=result.entries_seen,
        articles_added=result.articles_added,
        articles_skipped=result.articles_skipped,
        articles_failed=result.articles_failed,
    )


@router.delete("/{feed_id}")
async def remove_feed(feed_id: int, service: FeedServiceDep) -> dict:
    """Unsubscribe from a feed. Its articles are deleted with it."""
    service.unsubscribe(feed_id)
    return {"success": True}
