"""
Row building for the bookmark list.

This module turns tags and bookmarks into the ordered list of rows a view
renders, either grouped under tag headers or split into page and ayah
sections, with an optional "current page" pair on top.
"""

import logging
from typing import List, Optional, Sequence

from ..utils.error_handler import InvalidLastPage
from .data_models import (
    BOOKMARKS_WITHOUT_TAGS_ID,
    NO_PAGE_SAVED,
    PAGES_FIRST,
    PAGES_LAST,
    AyahBookmarksHeader,
    Bookmark,
    BookmarkRow,
    CurrentPage,
    CurrentPageHeader,
    PageBookmarksHeader,
    Row,
    Tag,
    TagHeader,
    UntaggedHeader,
)
from .grouping import group_bookmarks_by_tag

logger = logging.getLogger(__name__)


def build_rows_grouped_by_tags(
    tags: Sequence[Tag], bookmarks: Sequence[Bookmark]
) -> List[Row]:
    """
    Build rows with one section per tag followed by an untagged section.

    Every tag gets a header even when no bookmark carries it. The untagged
    section is only emitted when it has bookmarks.
    """
    rows: List[Row] = []
    mapping = group_bookmarks_by_tag(tags, bookmarks)

    for tag in tags:
        rows.append(TagHeader(tag_id=tag.id, tag_name=tag.name))
        for bookmark in mapping[tag.id]:
            rows.append(BookmarkRow.from_bookmark(bookmark, tag.id))

    untagged = mapping[BOOKMARKS_WITHOUT_TAGS_ID]
    if untagged:
        rows.append(UntaggedHeader())
        for bookmark in untagged:
            rows.append(BookmarkRow.from_bookmark(bookmark))
    return rows


def build_sorted_rows(bookmarks: Sequence[Bookmark]) -> List[Row]:
    """
    Build rows with page bookmarks first and ayah bookmarks after.

    Each section gets its header only when it has bookmarks. The store's
    ordering is kept inside both sections.
    """
    rows: List[Row] = []
    ayah_bookmarks = []

    for bookmark in bookmarks:
        if bookmark.is_page_bookmark:
            rows.append(BookmarkRow.from_bookmark(bookmark))
        else:
            ayah_bookmarks.append(bookmark)

    if rows:
        rows.insert(0, PageBookmarksHeader())

    if ayah_bookmarks:
        rows.append(AyahBookmarksHeader())
        for bookmark in ayah_bookmarks:
            rows.append(BookmarkRow.from_bookmark(bookmark))
    return rows


def is_valid_last_page(last_page: Optional[int]) -> bool:
    """
    Check whether a saved last page should be shown.

    Missing values and the ``NO_PAGE_SAVED`` sentinel are quietly rejected;
    any other value outside the page range is logged as a warning.
    """
    if last_page is None or last_page == NO_PAGE_SAVED:
        return False
    if last_page < PAGES_FIRST or last_page > PAGES_LAST:
        logger.warning(
            "Got invalid last saved page as %d",
            last_page,
            extra={"category": InvalidLastPage.__name__},
        )
        return False
    return True


def build_rows(
    bookmarks: Sequence[Bookmark],
    tags: Sequence[Tag],
    group_by_tags: bool,
    last_page: Optional[int] = None,
) -> List[Row]:
    """
    Build the full list of rows for the bookmarks view.

    Args:
        bookmarks: Bookmarks in the order the store returned them
        tags: Tags in display order
        group_by_tags: Group under tag headers instead of page/ayah sections
        last_page: Last visited page, ``None`` or ``NO_PAGE_SAVED`` for none

    Returns:
        Ordered rows, starting with the current page pair when the last
        page is valid
    """
    if group_by_tags:
        rows = build_rows_grouped_by_tags(tags, bookmarks)
    else:
        rows = build_sorted_rows(bookmarks)

    if is_valid_last_page(last_page):
        rows.insert(0, CurrentPageHeader())
        rows.insert(1, CurrentPage(page=last_page))
    return rows
