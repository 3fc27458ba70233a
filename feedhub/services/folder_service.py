"""
Folder service: folder CRUD, the folder tree view, and moving feeds.
"""

from ..database import Database, DBFolder
from ..exceptions import ValidationError, require_folder
from ..schemas import FeedSummary, FolderNode, FolderTreeResponse


class FolderService:
    """Service for folder-related business logic."""

    def __init__(self, db: Database):
        self.db = db

    def create_folder(self, name: str, parent_id: int | None = None) -> DBFolder:
        """
        Create a folder under an optional parent.

        Raises:
            ValidationError: empty name or a sibling with the same name exists
            NotFoundError: parent folder does not exist
        """
        name = name.strip()
        if not name:
            raise ValidationError("folder name cannot be empty")
        if parent_id is not None:
            require_folder(self.db.get_folder(parent_id))
        if self.db.folders.find_sibling(name, parent_id):
            raise ValidationError(f"folder with name '{name}' already exists")

        folder_id = self.db.folders.add(name, parent_id)
        return require_folder(self.db.get_folder(folder_id))

    def rename_folder(self, folder_id: int, name: str) -> DBFolder:
        name = name.strip()
        if not name:
            raise ValidationError("folder name cannot be empty")
        folder = require_folder(self.db.get_folder(folder_id))
        if self.db.folders.find_sibling(name, folder.parent_id, exclude_id=folder_id):
            raise ValidationError(f"folder with name '{name}' already exists")

        self.db.folders.rename(folder_id, name)
        return require_folder(self.db.get_folder(folder_id))

    def delete_folder(self, folder_id: int) -> None:
        """Delete an empty folder. Folders that still hold feeds or subfolders are refused."""
        require_folder(self.db.get_folder(folder_id))
        feed_count, subfolder_count = self.db.folders.count_children(folder_id)
        if feed_count > 0:
            raise ValidationError(f"cannot delete folder: it contains {feed_count} feeds")
        if subfolder_count > 0:
            raise ValidationError(f"cannot delete folder: it contains {subfolder_count} subfolders")
        self.db.folders.delete(folder_id)

    def move_feeds(self, feed_ids: list[int], folder_id: int | None) -> int:
        """Move feeds into a folder, or out of any folder when folder_id is None."""
        if not feed_ids:
            raise ValidationError("No feed IDs provided")
        if folder_id is not None:
            require_folder(self.db.get_folder(folder_id))
        return self.db.feeds.move_to_folder(feed_ids, folder_id)

    def get_tree(self) -> FolderTreeResponse:
        """Build the folder hierarchy with the feeds in each folder."""
        folders = self.db.get_folders()
        feeds = self.db.get_feeds()

        nodes = {
            f.id: FolderNode(
                id=f.id,
                name=f.name,
                parent_id=f.parent_id,
                position=f.position,
                created_at=f.created_at.isoformat(),
            )
            for f in folders
        }

        roots: list[FolderNode] = []
        for folder in folders:
            node = nodes[folder.id]
            parent = nodes.get(folder.parent_id) if folder.parent_id else None
            if parent:
                parent.children.append(node)
            else:
                roots.append(node)

        uncategorized: list[FeedSummary] = []
        for feed in feeds:
            summary = FeedSummary.from_db(feed)
            node = nodes.get(feed.folder_id) if feed.folder_id else None
            if node:
                node.feeds.append(summary)
            else:
                uncategorized.append(summary)

        return FolderTreeResponse(folders=roots, uncategorized_feeds=uncategorized)
