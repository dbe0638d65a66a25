"""
Tag grouping for bookmarks.

Buckets bookmarks under every tag they carry, plus one synthetic bucket for
bookmarks that carry no known tag.
"""

from typing import Dict, List, Sequence, Set

from .data_models import BOOKMARKS_WITHOUT_TAGS_ID, Bookmark, Tag


def group_bookmarks_by_tag(
    tags: Sequence[Tag], bookmarks: Sequence[Bookmark]
) -> Dict[int, List[Bookmark]]:
    """
    Map each tag id to the bookmarks carrying it.

    Bookmarks keep their input order inside every bucket and may appear under
    several tags. Bookmarks not seen under any of ``tags`` (including those
    whose tag ids are stale) go to ``BOOKMARKS_WITHOUT_TAGS_ID``.

    Args:
        tags: Tags in display order
        bookmarks: Bookmarks in the order the store returned them

    Returns:
        Dictionary with one key per tag plus the untagged key
    """
    seen: Set[int] = set()
    mapping: Dict[int, List[Bookmark]] = {}

    for tag in tags:
        matching = []
        for bookmark in bookmarks:
            if bookmark.has_tag(tag.id):
                matching.append(bookmark)
                seen.add(bookmark.id)
        mapping[tag.id] = matching

    # Needs the full tag set, so only after every tag bucket is built
    mapping[BOOKMARKS_WITHOUT_TAGS_ID] = [
        bookmark for bookmark in bookmarks if bookmark.id not in seen
    ]
    return mapping


def build_tag_map(tags: Sequence[Tag]) -> Dict[int, Tag]:
    """Index every tag by id, whether or not any bookmark carries it."""
    return {tag.id: tag for tag in tags}
