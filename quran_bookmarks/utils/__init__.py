"""
Utility modules for Quran Bookmarks.

This package contains error handling, logging setup and terminal rendering.
"""

from .error_handler import (
    BookmarksError,
    ConfigurationError,
    InvalidLastPage,
    OperationCancelledError,
    StorageConnectionError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    user_message,
)

__all__ = [
    "BookmarksError",
    "ConfigurationError",
    "InvalidLastPage",
    "OperationCancelledError",
    "StorageConnectionError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "user_message",
]
