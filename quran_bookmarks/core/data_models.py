"""
Data models for Quran Bookmarks.

This module defines the bookmark and tag records read from storage, the
typed rows produced for rendering, and the containers passed between the
storage layer and the bookmark model.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

# Valid page range of the mushaf and the "nothing saved" sentinel
PAGES_FIRST = 1
PAGES_LAST = 604
NO_PAGE_SAVED = -1

# Key of the bucket holding bookmarks without any known tag
BOOKMARKS_WITHOUT_TAGS_ID = -1


@dataclass
class Tag:
    """A user defined label that can be attached to many bookmarks."""

    id: int
    name: str


@dataclass
class Bookmark:
    """
    A saved position in the mushaf.

    A page bookmark has neither ``sura`` nor ``ayah``; an ayah bookmark has
    both. ``page`` is always set so ayah bookmarks can still be opened.
    """

    id: int
    page: int
    sura: Optional[int] = None
    ayah: Optional[int] = None
    timestamp: Optional[datetime] = None
    tags: List[int] = field(default_factory=list)

    @property
    def is_page_bookmark(self) -> bool:
        return self.sura is None and self.ayah is None

    def has_tag(self, tag_id: int) -> bool:
        return tag_id in self.tags

    def get_location(self) -> str:
        """
        Get a short human readable location for this bookmark.

        Returns:
            "Page N" for page bookmarks, "Sura S, Ayah A" otherwise
        """
        if self.is_page_bookmark:
            return f"Page {self.page}"
        return f"Sura {self.sura}, Ayah {self.ayah}"


@dataclass
class BookmarkData:
    """Snapshot of tags and bookmarks read from the store."""

    tags: List[Tag] = field(default_factory=list)
    bookmarks: List[Bookmark] = field(default_factory=list)


# ============ Rows ============


@dataclass(frozen=True)
class CurrentPageHeader:
    """Header above the current page row."""


@dataclass(frozen=True)
class CurrentPage:
    """The page the reader last visited."""

    page: int


@dataclass(frozen=True)
class TagHeader:
    """Header introducing the bookmarks carrying one tag."""

    tag_id: int
    tag_name: str


@dataclass(frozen=True)
class UntaggedHeader:
    """Header introducing bookmarks without any tag."""


@dataclass(frozen=True)
class PageBookmarksHeader:
    """Header introducing page bookmarks in the flat layout."""


@dataclass(frozen=True)
class AyahBookmarksHeader:
    """Header introducing ayah bookmarks in the flat layout."""


@dataclass(frozen=True)
class BookmarkRow:
    """
    One bookmark in the list.

    ``tag_id`` is only set when the row is nested under a tag header, so the
    same bookmark shows up once per tag it carries.
    """

    bookmark_id: int
    tag_id: Optional[int]
    bookmark: Bookmark = field(compare=False)

    @classmethod
    def from_bookmark(
        cls, bookmark: Bookmark, tag_id: Optional[int] = None
    ) -> "BookmarkRow":
        return cls(bookmark_id=bookmark.id, tag_id=tag_id, bookmark=bookmark)


Row = Union[
    CurrentPageHeader,
    CurrentPage,
    TagHeader,
    UntaggedHeader,
    PageBookmarksHeader,
    AyahBookmarksHeader,
    BookmarkRow,
]


@dataclass
class BookmarkResult:
    """Rows ready for rendering plus a lookup of every known tag."""

    rows: List[Row]
    tag_map: Dict[int, Tag]


@dataclass
class DeletionBatch:
    """
    Instructions for one bulk delete against the store.

    Attributes:
        tag_ids: Tags to delete outright
        bookmark_ids: Bookmarks to delete outright
        untag: (bookmark_id, tag_id) associations to remove
    """

    tag_ids: List[int] = field(default_factory=list)
    bookmark_ids: List[int] = field(default_factory=list)
    untag: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.tag_ids or self.bookmark_ids or self.untag)

    def __str__(self) -> str:
        return (
            f"DeletionBatch(tags={len(self.tag_ids)}, "
            f"bookmarks={len(self.bookmark_ids)}, "
            f"untag={len(self.untag)})"
        )
