"""
SQLite-backed bookmark store.

Persists bookmarks, tags and their associations, and applies bulk deletes
inside a single transaction.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Generator, List, Optional, Sequence, Tuple, Union

from ...utils.error_handler import (
    StorageConnectionError,
    StorageReadError,
    StorageWriteError,
)
from ..data_models import Bookmark, Tag
from .protocol import SORT_DATE_ADDED, SORT_LOCATION


class SQLiteBookmarkStore:
    """
    Bookmark store kept in a SQLite database.

    Example:
        >>> store = SQLiteBookmarkStore(Path("bookmarks.db"))
        >>> bookmark_id = store.add_bookmark(page=5)
        >>> tag_id = store.add_tag("Favorites")
        >>> store.tag_bookmark(bookmark_id, [tag_id])
        >>> store.get_bookmarks(SORT_LOCATION)
    """

    STORE_NAME = "sqlite"

    DB_SCHEMA = """
    CREATE TABLE IF NOT EXISTS bookmarks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        sura INTEGER,
        ayah INTEGER,
        page INTEGER NOT NULL,
        added_date TIMESTAMP NOT NULL
    );

    CREATE TABLE IF NOT EXISTS tags (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        added_date TIMESTAMP NOT NULL
    );

    CREATE TABLE IF NOT EXISTS bookmark_tag (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        bookmark_id INTEGER NOT NULL,
        tag_id INTEGER NOT NULL,
        added_date TIMESTAMP NOT NULL,
        UNIQUE (bookmark_id, tag_id)
    );

    CREATE INDEX IF NOT EXISTS idx_bookmarks_page ON bookmarks(page);
    CREATE INDEX IF NOT EXISTS idx_bookmark_tag_tag ON bookmark_tag(tag_id);
    """

    BOOKMARKS_QUERY = """
    SELECT b.id, b.sura, b.ayah, b.page, b.added_date, bt.tag_id
    FROM bookmarks b
    LEFT JOIN bookmark_tag bt ON b.id = bt.bookmark_id
    """

    ORDER_BY = {
        SORT_DATE_ADDED: "ORDER BY b.added_date DESC, b.id DESC, bt.tag_id",
        SORT_LOCATION: "ORDER BY b.page, b.sura, b.ayah, b.id, bt.tag_id",
    }

    def __init__(self, db_path: Union[str, Path] = Path("quran_bookmarks.db")):
        """
        Initialize the store, creating the schema if needed.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self.logger = logging.getLogger(__name__)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize the database schema."""
        try:
            with self._get_connection() as conn:
                conn.executescript(self.DB_SCHEMA)
                conn.commit()
            self.logger.debug(f"Database initialized at {self.db_path}")
        except sqlite3.Error as e:
            self.logger.error(f"Failed to initialize database: {e}")
            raise StorageConnectionError(
                f"Could not initialize {self.db_path}",
                store_name=self.STORE_NAME,
                original_error=e,
            )

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection."""
        conn = None
        try:
            try:
                conn = sqlite3.connect(str(self.db_path))
            except sqlite3.Error as e:
                raise StorageConnectionError(
                    f"Could not open {self.db_path}",
                    store_name=self.STORE_NAME,
                    original_error=e,
                )
            conn.row_factory = sqlite3.Row
            yield conn
        finally:
            if conn:
                conn.close()

    # ============ Read Methods ============

    def get_bookmarks(self, sort_order: int = SORT_DATE_ADDED) -> List[Bookmark]:
        """
        Read every bookmark together with its tag ids.

        Args:
            sort_order: SORT_DATE_ADDED (newest first) or SORT_LOCATION.
                        Anything else falls back to SORT_DATE_ADDED.

        Returns:
            List of Bookmark objects
        """
        order_by = self.ORDER_BY.get(sort_order, self.ORDER_BY[SORT_DATE_ADDED])
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(f"{self.BOOKMARKS_QUERY} {order_by}")
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            self.logger.error(f"Error reading bookmarks: {e}")
            raise StorageReadError(
                "Could not read bookmarks",
                store_name=self.STORE_NAME,
                original_error=e,
            )

        # One row per (bookmark, tag); dict keeps the first-seen order
        bookmarks: Dict[int, Bookmark] = {}
        for row in rows:
            bookmark = bookmarks.get(row["id"])
            if bookmark is None:
                bookmark = Bookmark(
                    id=row["id"],
                    page=row["page"],
                    sura=row["sura"],
                    ayah=row["ayah"],
                    timestamp=_parse_timestamp(row["added_date"]),
                )
                bookmarks[row["id"]] = bookmark
            if row["tag_id"] is not None:
                bookmark.tags.append(row["tag_id"])

        return list(bookmarks.values())

    def get_tags(self) -> List[Tag]:
        """
        Read every tag, ordered by name.

        Returns:
            List of Tag objects
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.execute("SELECT id, name FROM tags ORDER BY name, id")
                return [Tag(id=row["id"], name=row["name"]) for row in cursor]
        except sqlite3.Error as e:
            self.logger.error(f"Error reading tags: {e}")
            raise StorageReadError(
                "Could not read tags",
                store_name=self.STORE_NAME,
                original_error=e,
            )

    def get_bookmark_id(
        self, sura: Optional[int], ayah: Optional[int], page: int
    ) -> Optional[int]:
        """
        Find the bookmark at a location.

        Returns:
            The bookmark id, or None if no bookmark exists there
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    """
                    SELECT id FROM bookmarks
                    WHERE page = ? AND sura IS ? AND ayah IS ?
                    """,
                    (page, sura, ayah),
                )
                row = cursor.fetchone()
                return row["id"] if row else None
        except sqlite3.Error as e:
            raise StorageReadError(
                "Could not look up bookmark",
                store_name=self.STORE_NAME,
                original_error=e,
            )

    # ============ Write Methods ============

    def add_bookmark(
        self, page: int, sura: Optional[int] = None, ayah: Optional[int] = None
    ) -> int:
        """
        Add a bookmark unless one already exists at the same location.

        Args:
            page: Page number
            sura: Sura number for ayah bookmarks
            ayah: Ayah number for ayah bookmarks

        Returns:
            Id of the new or existing bookmark
        """
        existing = self.get_bookmark_id(sura, ayah, page)
        if existing is not None:
            return existing

        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO bookmarks (sura, ayah, page, added_date)
                    VALUES (?, ?, ?, ?)
                    """,
                    (sura, ayah, page, datetime.now().isoformat()),
                )
                conn.commit()
                return cursor.lastrowid
        except sqlite3.Error as e:
            self.logger.error(f"Error adding bookmark: {e}")
            raise StorageWriteError(
                "Could not add bookmark",
                store_name=self.STORE_NAME,
                original_error=e,
            )

    def add_tag(self, name: str) -> int:
        """
        Add a tag. Names are not required to be unique.

        Returns:
            Id of the new tag
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "INSERT INTO tags (name, added_date) VALUES (?, ?)",
                    (name, datetime.now().isoformat()),
                )
                conn.commit()
                return cursor.lastrowid
        except sqlite3.Error as e:
            self.logger.error(f"Error adding tag: {e}")
            raise StorageWriteError(
                "Could not add tag",
                store_name=self.STORE_NAME,
                original_error=e,
            )

    def update_tag(self, tag_id: int, name: str) -> bool:
        """
        Rename a tag.

        Returns:
            True if a tag was renamed
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "UPDATE tags SET name = ? WHERE id = ?", (name, tag_id)
                )
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StorageWriteError(
                "Could not rename tag",
                store_name=self.STORE_NAME,
                original_error=e,
            )

    def tag_bookmark(self, bookmark_id: int, tag_ids: Sequence[int]) -> None:
        """Attach tags to a bookmark. Existing associations are kept."""
        now = datetime.now().isoformat()
        try:
            with self._get_connection() as conn:
                conn.executemany(
                    """
                    INSERT OR IGNORE INTO bookmark_tag (bookmark_id, tag_id, added_date)
                    VALUES (?, ?, ?)
                    """,
                    [(bookmark_id, tag_id, now) for tag_id in tag_ids],
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StorageWriteError(
                "Could not tag bookmark",
                store_name=self.STORE_NAME,
                original_error=e,
            )

    def bulk_delete(
        self,
        tag_ids: Sequence[int],
        bookmark_ids: Sequence[int],
        untag: Sequence[Tuple[int, int]],
    ) -> None:
        """
        Delete tags, bookmarks and associations in one transaction.

        Deleting a tag or bookmark also drops its associations. Repeated
        ids are harmless. On failure nothing is applied.
        """
        try:
            with self._get_connection() as conn:
                try:
                    conn.executemany(
                        "DELETE FROM bookmark_tag WHERE bookmark_id = ? AND tag_id = ?",
                        list(untag),
                    )
                    tag_params = [(tag_id,) for tag_id in tag_ids]
                    conn.executemany("DELETE FROM tags WHERE id = ?", tag_params)
                    conn.executemany(
                        "DELETE FROM bookmark_tag WHERE tag_id = ?", tag_params
                    )
                    bookmark_params = [(bookmark_id,) for bookmark_id in bookmark_ids]
                    conn.executemany(
                        "DELETE FROM bookmarks WHERE id = ?", bookmark_params
                    )
                    conn.executemany(
                        "DELETE FROM bookmark_tag WHERE bookmark_id = ?",
                        bookmark_params,
                    )
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
        except sqlite3.Error as e:
            self.logger.error(f"Bulk delete failed, rolled back: {e}")
            raise StorageWriteError(
                "Could not delete bookmarks",
                store_name=self.STORE_NAME,
                original_error=e,
            )

        self.logger.debug(
            f"Deleted {len(tag_ids)} tags, {len(bookmark_ids)} bookmarks, "
            f"{len(untag)} tag associations"
        )


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
