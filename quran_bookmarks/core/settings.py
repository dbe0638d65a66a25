"""
Reader settings persisted as a small JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from ..utils.error_handler import StorageWriteError
from .data_models import NO_PAGE_SAVED

logger = logging.getLogger(__name__)


class ReaderSettings:
    """
    Settings store remembering the last visited page.

    Example:
        >>> settings = ReaderSettings(Path("quran_settings.json"))
        >>> settings.set_last_page(42)
        >>> settings.get_last_page()
        42
    """

    STORE_NAME = "settings"
    LAST_PAGE_KEY = "last_page"

    def __init__(self, path: Union[str, Path] = Path("quran_settings.json")):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read settings from {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_last_page(self) -> int:
        """
        Get the last visited page.

        Returns:
            The saved page, or NO_PAGE_SAVED when none is saved or the file
            is unreadable. Range checks are left to the caller.
        """
        value = self._load().get(self.LAST_PAGE_KEY, NO_PAGE_SAVED)
        if isinstance(value, bool) or not isinstance(value, int):
            logger.warning(f"Ignoring non-integer last page {value!r}")
            return NO_PAGE_SAVED
        return value

    def set_last_page(self, page: int) -> None:
        """
        Save the last visited page.

        Raises:
            StorageWriteError: If the settings file cannot be written
        """
        data = self._load()
        data[self.LAST_PAGE_KEY] = page
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(f"Could not write settings to {self.path}: {e}")
            raise StorageWriteError(
                f"Could not save settings to {self.path}",
                store_name=self.STORE_NAME,
                original_error=e,
            )
