"""
Folder repository - CRUD operations for folders.
"""

from datetime import datetime, timezone

from .connection import DatabaseConnection
from .converters import row_to_folder
from .models import DBFolder


class FolderRepository:
    """Repository for folder operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(self, name: str, parent_id: int | None = None) -> int:
        """Add a folder at the end of its siblings. Returns folder ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT MAX(position) AS max_position FROM folders WHERE parent_id IS ?",
                (parent_id,)
            ).fetchone()
            position = 0 if row["max_position"] is None else row["max_position"] + 1
            cursor = conn.execute(
                "INSERT INTO folders (name, parent_id, position, created_at) VALUES (?, ?, ?, ?)",
                (name, parent_id, position, datetime.now(timezone.utc).isoformat())
            )
            return cursor.lastrowid

    def get(self, folder_id: int) -> DBFolder | None:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM folders WHERE id = ?", (folder_id,)
            ).fetchone()
            return row_to_folder(row) if row else None

    def get_all(self) -> list[DBFolder]:
        """Get all folders ordered for tree building."""
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM folders ORDER BY parent_id, position, name"
            ).fetchall()
            return [row_to_folder(row) for row in rows]

    def find_sibling(
        self,
        name: str,
        parent_id: int | None,
        exclude_id: int | None = None
    ) -> DBFolder | None:
        """Find a folder with the given name under the same parent."""
        with self._db.conn() as conn:
            row = conn.execute(
                """SELECT * FROM folders
                   WHERE name = ? AND parent_id IS ? AND id IS NOT ?""",
                (name, parent_id, exclude_id)
            ).fetchone()
            return row_to_folder(row) if row else None

    def rename(self, folder_id: int, name: str):
        with self._db.conn() as conn:
            conn.execute("UPDATE folders SET name = ? WHERE id = ?", (name, folder_id))

    def count_children(self, folder_id: int) -> tuple[int, int]:
        """Return (feed count, subfolder count) directly under a folder."""
        with self._db.conn() as conn:
            feeds = conn.execute(
                "SELECT COUNT(*) FROM feeds WHERE folder_id = ?", (folder_id,)
            ).fetchone()[0]
            subfolders = conn.execute(
                "SELECT COUNT(*) FROM folders WHERE parent_id = ?", (folder_id,)
            ).fetchone()[0]
            return feeds, subfolders

    def delete(self, folder_id: int) -> bool:
        with self._db.conn() as conn:
            cursor = conn.execute("DELETE FROM folders WHERE id = ?", (folder_id,))
            return cursor.rowcount > 0
