"""
Bookmark Model.

Builds the bookmark list shown to the reader from the bookmark store and the
reader settings, and turns a selection of rows into a single bulk delete.

Example:
    >>> model = BookmarkModel(SQLiteBookmarkStore(db_path), ReaderSettings(path))
    >>> result = model.fetch(SORT_LOCATION, group_by_tags=True)
    >>> model.remove_rows([row for row in result.rows if selected(row)])
"""

import asyncio
import logging
import threading
from typing import Iterable, Optional

from ..utils.error_handler import OperationCancelledError
from .data_models import (
    BookmarkData,
    BookmarkResult,
    BookmarkRow,
    DeletionBatch,
    Row,
    TagHeader,
)
from .data_sources.protocol import BookmarkStore, SettingsStore
from .grouping import build_tag_map
from .row_builder import build_rows


def classify_rows(rows: Iterable[Row]) -> DeletionBatch:
    """
    Sort rows into tag deletes, bookmark deletes and tag removals.

    A tag header deletes its tag. A bookmark row nested under a tag only
    removes that tag from the bookmark; an ungrouped bookmark row deletes
    the bookmark. Rows without a positive id and informational rows are
    ignored. Duplicates are kept as they are.

    Args:
        rows: Rows selected for removal

    Returns:
        DeletionBatch for the store
    """
    batch = DeletionBatch()
    for row in rows:
        if isinstance(row, TagHeader):
            if row.tag_id > 0:
                batch.tag_ids.append(row.tag_id)
        elif isinstance(row, BookmarkRow) and row.bookmark_id > 0:
            if row.tag_id is not None and row.tag_id > 0:
                batch.untag.append((row.bookmark_id, row.tag_id))
            else:
                batch.bookmark_ids.append(row.bookmark_id)
    return batch


class BookmarkModel:
    """
    Aggregates stored bookmarks and tags into rows for display.

    The model keeps no state of its own beyond its collaborators, so one
    instance can serve concurrent callers; the store serializes access.
    """

    def __init__(self, store: BookmarkStore, settings: SettingsStore):
        """
        Initialize the model.

        Args:
            store: Source of bookmarks and tags, target of deletes
            settings: Source of the last visited page
        """
        self.store = store
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def fetch_bookmark_data(self, sort_order: int) -> BookmarkData:
        """Read tags and bookmarks from the store. Errors propagate as is."""
        bookmarks = self.store.get_bookmarks(sort_order)
        tags = self.store.get_tags()
        return BookmarkData(tags=tags, bookmarks=bookmarks)

    def fetch(
        self,
        sort_order: int,
        group_by_tags: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> BookmarkResult:
        """
        Build the bookmark list.

        Args:
            sort_order: Ordering token passed through to the store
            group_by_tags: Group rows under tag headers
            cancel_event: Checked once the store has answered; when set, no
                          result is delivered

        Returns:
            BookmarkResult with the rows and every known tag

        Raises:
            StorageError: If the store could not be read
            OperationCancelledError: If cancel_event was set
        """
        data = self.fetch_bookmark_data(sort_order)
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelledError("Bookmark fetch cancelled")

        rows = build_rows(
            data.bookmarks,
            data.tags,
            group_by_tags,
            self.settings.get_last_page(),
        )
        tag_map = build_tag_map(data.tags)
        self.logger.debug(
            f"Built {len(rows)} rows from {len(data.bookmarks)} bookmarks "
            f"and {len(data.tags)} tags"
        )
        return BookmarkResult(rows=rows, tag_map=tag_map)

    async def fetch_async(
        self, sort_order: int, group_by_tags: bool = False
    ) -> BookmarkResult:
        """
        Build the bookmark list on a worker thread.

        Cancelling the awaiting task stops the result from being delivered.
        """
        cancel_event = threading.Event()
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(
                None, self.fetch, sort_order, group_by_tags, cancel_event
            )
        except asyncio.CancelledError:
            cancel_event.set()
            raise

    def remove_rows(self, rows: Iterable[Row]) -> DeletionBatch:
        """
        Delete what the given rows stand for in one storage call.

        Args:
            rows: Rows selected for removal

        Returns:
            The DeletionBatch that was submitted

        Raises:
            StorageError: If the store rejected the batch
        """
        batch = classify_rows(rows)
        self.logger.info(f"Removing {batch}")
        self.store.bulk_delete(batch.tag_ids, batch.bookmark_ids, batch.untag)
        return batch

    async def remove_rows_async(self, rows: Iterable[Row]) -> DeletionBatch:
        """Run remove_rows on a worker thread."""
        rows = list(rows)
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self.remove_rows, rows)
