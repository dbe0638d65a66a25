"""
Logging configuration for Quran Bookmarks.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "WARNING", log_file: Optional[Union[str, Path]] = None
) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Name of the root log level
        log_file: Optional log file, written in addition to stderr
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers = []

    # Keep stdout free for the bookmark table
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Log level: {log_level}")
