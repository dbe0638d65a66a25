"""
Error Handling for Quran Bookmarks

This module defines the exception hierarchy used across the package and the
mapping from failures to the short messages shown to users.
"""

from typing import Optional


# ============================================================================
# Unified Exception Hierarchy
# ============================================================================
# All custom exceptions for the package are defined here.
# Import these exceptions from quran_bookmarks.utils.error_handler
# ============================================================================


class BookmarksError(Exception):
    """Base exception for all quran bookmarks errors."""

    pass


# ============================================================================
# Storage Errors
# ============================================================================


class StorageError(BookmarksError):
    """
    Exception raised when reading or writing the bookmark store fails.

    Attributes:
        message: Error description
        store_name: Name of the store that raised the error
        original_error: The underlying exception if any
    """

    def __init__(
        self,
        message: str,
        store_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.store_name = store_name
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []
        if self.store_name:
            parts.append(f"[{self.store_name}]")
        parts.append(self.message)
        if self.original_error:
            parts.append(
                f"(Caused by: {type(self.original_error).__name__}: "
                f"{self.original_error})"
            )
        return " ".join(parts)


class StorageConnectionError(StorageError):
    """Exception raised when the store cannot be opened."""

    pass


class StorageReadError(StorageError):
    """Exception raised when reading from the store fails."""

    pass


class StorageWriteError(StorageError):
    """Exception raised when writing to the store fails."""

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(BookmarksError):
    """Configuration-related errors."""

    pass


# ============================================================================
# Processing Errors
# ============================================================================


class OperationCancelledError(BookmarksError):
    """Raised when a fetch is cancelled before its result is delivered."""

    pass


class InvalidLastPage(UserWarning):
    """
    Warning category for a saved last page outside the valid page range.

    Never raised: the row builder logs it and omits the current page rows.
    """

    pass


# ============================================================================
# User-facing messages
# ============================================================================

USER_MESSAGES = {
    "fetch": "Could not load bookmarks",
    "remove": "Could not delete bookmarks",
    "save": "Could not save settings",
}


def user_message(operation: str, error: Optional[Exception] = None) -> str:
    """
    Get the message shown to a user when an operation fails.

    Args:
        operation: One of "fetch", "remove" or "save"
        error: The failure, appended as detail when given

    Returns:
        Human readable message
    """
    base = USER_MESSAGES.get(operation, "Operation failed")
    if isinstance(error, StorageError):
        return f"{base}: {error.message}"
    if error is not None:
        return f"{base}: {error}"
    return base
