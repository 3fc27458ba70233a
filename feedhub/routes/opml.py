"""
OPML routes: import and export of subscription lists.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..auth import verify_api_key
from ..schemas import OPMLImportRequest, OPMLImportResponse
from ..services import FeedServiceDep

router = APIRouter(
    prefix="/opml",
    tags=["opml"],
    dependencies=[Depends(verify_api_key)]
)


@router.post("/import")
async def import_opml(request: OPMLImportRequest, service: FeedServiceDep) -> OPMLImportResponse:
    """
    Import feeds from OPML content.

    Folders in the document are created, each feed is validated and
    subscribed; per-feed failures are reported in `errors`.
    """
    return await service.import_opml(request.opml_content)


@router.get("/export")
async def export_opml(service: FeedServiceDep) -> Response:
    """Export all folders and feeds as an OPML attachment."""
    return Response(
        content=service.export_opml(),
        media_type="application/xml",
        headers={"Content-Disposition": 'attachment; filename="feedhub.opml"'},
    )
