"""
Core bookmark modules.

This package contains the data models, tag grouping, row building and the
bookmark model that ties them to storage.
"""

from .bookmark_model import BookmarkModel, classify_rows
from .grouping import build_tag_map, group_bookmarks_by_tag
from .row_builder import build_rows

__all__ = [
    'BookmarkModel',
    'classify_rows',
    'build_rows',
    'build_tag_map',
    'group_bookmarks_by_tag',
]
