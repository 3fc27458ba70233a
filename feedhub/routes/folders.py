"""
Folder routes: tree view, create, rename, delete, move feeds.
"""

from fastapi import APIRouter, Depends, status

from ..auth import verify_api_key
from ..schemas import (
    CreateFolderRequest,
    FolderResponse,
    FolderTreeResponse,
    MoveFeedsRequest,
    UpdateFolderRequest,
)
from ..services import FolderServiceDep

router = APIRouter(
    prefix="/folders",
    tags=["folders"],
    dependencies=[Depends(verify_api_key)]
)


@router.get("")
async def list_folders(service: FolderServiceDep) -> FolderTreeResponse:
    """Folder hierarchy with feeds, plus feeds that are in no folder."""
    return service.get_tree()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_folder(request: CreateFolderRequest, service: FolderServiceDep) -> FolderResponse:
    return FolderResponse.from_db(service.create_folder(request.name, request.parent_id))


@router.post("/move-feeds")
async def move_feeds(request: MoveFeedsRequest, service: FolderServiceDep) -> dict:
    count = service.move_feeds(request.feed_ids, request.folder_id)
    return {"success": True, "count": count}


@router.put("/{folder_id}")
async def update_folder(
    folder_id: int,
    request: UpdateFolderRequest,
    service: FolderServiceDep,
) -> FolderResponse:
    return FolderResponse.from_db(service.rename_folder(folder_id, request.name))


@router.delete("/{folder_id}")
async def delete_folder(folder_id: int, service: FolderServiceDep) -> dict:
    """Delete an empty folder."""
    service.delete_folder(folder_id)
    return {"success": True}
