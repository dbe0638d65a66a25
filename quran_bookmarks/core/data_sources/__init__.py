"""
Data Sources Module for Quran Bookmarks.

This module provides the storage interfaces the bookmark model depends on
and the SQLite implementation used by the command line tool.

Main Components:
    - BookmarkStore: Protocol for reading bookmarks/tags and bulk deletes
    - SettingsStore: Protocol for the last visited page
    - SQLiteBookmarkStore: SQLite implementation of BookmarkStore

Usage:
    >>> from quran_bookmarks.core.data_sources import SQLiteBookmarkStore
    >>> store = SQLiteBookmarkStore(Path("quran_bookmarks.db"))
    >>> bookmarks = store.get_bookmarks(SORT_DATE_ADDED)
"""

from .protocol import (
    SORT_DATE_ADDED,
    SORT_LOCATION,
    BookmarkStore,
    SettingsStore,
)

from .sqlite_store import SQLiteBookmarkStore


__all__ = [
    # Protocols
    "BookmarkStore",
    "SettingsStore",
    # Sort orders
    "SORT_DATE_ADDED",
    "SORT_LOCATION",
    # Implementations
    "SQLiteBookmarkStore",
]
