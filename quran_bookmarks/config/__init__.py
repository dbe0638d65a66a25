"""
Configuration for Quran Bookmarks.
"""

from .configuration import Configuration
from .pydantic_config import (
    BookmarksConfig,
    ConfigurationManager,
    DisplayConfig,
    StorageConfig,
)

__all__ = [
    "Configuration",
    "BookmarksConfig",
    "ConfigurationManager",
    "DisplayConfig",
    "StorageConfig",
]
