"""
Configuration facade for Quran Bookmarks.

Wraps the Pydantic configuration manager and exposes the settings the
command line tool needs.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from .pydantic_config import BookmarksConfig, ConfigurationManager


class Configuration:
    """
    Configuration used by the command line tool.

    Values come from the configuration file, then environment variables,
    then command line arguments.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to user configuration file (TOML/JSON)
        """
        self._manager = ConfigurationManager(config_path)
        self._config = self._manager.config

    @property
    def config(self) -> BookmarksConfig:
        """Get the underlying Pydantic configuration."""
        return self._config

    def update_from_args(self, args: Dict[str, Any]) -> None:
        """
        Update configuration from command-line arguments.

        Args:
            args: Dictionary of parsed arguments
        """
        self._manager.update_from_cli_args(args)
        self._config = self._manager.config

    @property
    def database_path(self) -> Path:
        return self._config.storage.database_path

    @property
    def settings_path(self) -> Path:
        return self._config.storage.settings_path

    @property
    def sort_order(self) -> int:
        return self._config.display.sort_order_value

    @property
    def group_by_tags(self) -> bool:
        return self._config.display.group_by_tags

    @property
    def log_level(self) -> str:
        return self._config.log_level
