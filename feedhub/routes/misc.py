"""
Miscellaneous routes: health check and stats.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from .. import __version__
from ..auth import auth_enabled, verify_api_key
from ..config import state
from ..schemas import StatsResponse
from ..services import ArticleServiceDep

public_router = APIRouter(tags=["misc"])
router = APIRouter(tags=["misc"], dependencies=[Depends(verify_api_key)])


@public_router.get("/status")
async def health_check() -> dict:
    """API health check."""
    return {
        "status": "ok",
        "version": __version__,
        "auth_enabled": auth_enabled(),
        "scheduler_running": bool(state.scheduler and state.scheduler.running),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/stats")
async def get_stats(service: ArticleServiceDep) -> StatsResponse:
    """Feed and article counts."""
    return StatsResponse.from_stats(service.stats())
