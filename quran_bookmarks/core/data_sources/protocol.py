"""
Storage Protocols for Quran Bookmarks.

This module defines the interfaces the bookmark model depends on: a store
that reads bookmarks and tags and applies bulk deletes, and a settings
store that remembers the last visited page.
"""

from abc import abstractmethod
from typing import List, Protocol, Sequence, Tuple, runtime_checkable

from ..data_models import Bookmark, Tag

# Sort orders understood by the bookmark stores
SORT_DATE_ADDED = 0
SORT_LOCATION = 1


@runtime_checkable
class BookmarkStore(Protocol):
    """
    Protocol for bookmark stores.

    Example Usage:
        >>> store = SQLiteBookmarkStore(Path("bookmarks.db"))
        >>> bookmarks = store.get_bookmarks(SORT_LOCATION)
        >>> tags = store.get_tags()
        >>> store.bulk_delete([3], [], [(10, 4)])
    """

    @abstractmethod
    def get_bookmarks(self, sort_order: int) -> List[Bookmark]:
        """
        Read every bookmark with its tag ids.

        Args:
            sort_order: Ordering token, e.g. SORT_DATE_ADDED or
                        SORT_LOCATION. Interpreted only by the store.

        Returns:
            Bookmarks in the requested order

        Raises:
            StorageReadError: If reading fails
        """
        ...

    @abstractmethod
    def get_tags(self) -> List[Tag]:
        """
        Read every tag in display order.

        Raises:
            StorageReadError: If reading fails
        """
        ...

    @abstractmethod
    def bulk_delete(
        self,
        tag_ids: Sequence[int],
        bookmark_ids: Sequence[int],
        untag: Sequence[Tuple[int, int]],
    ) -> None:
        """
        Apply a batch of deletions as one unit of work.

        Either every instruction is applied or none is. Duplicate ids within
        a batch must be harmless.

        Args:
            tag_ids: Tags to delete, along with their associations
            bookmark_ids: Bookmarks to delete, along with their associations
            untag: (bookmark_id, tag_id) associations to remove

        Raises:
            StorageWriteError: If the batch could not be applied
        """
        ...


@runtime_checkable
class SettingsStore(Protocol):
    """Protocol for reader settings."""

    @abstractmethod
    def get_last_page(self) -> int:
        """
        Get the last visited page.

        Returns:
            Page number, or NO_PAGE_SAVED when nothing is saved
        """
        ...
