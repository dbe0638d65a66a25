"""
Test data fixtures for quran bookmarks tests.

Contains sample tags and bookmarks shaped like what the store returns.
"""

from datetime import datetime
from typing import List

from quran_bookmarks.core.data_models import Bookmark, Tag

SAMPLE_TAGS = [
    {"id": 1, "name": "Favorites"},
    {"id": 2, "name": "Memorize"},
    {"id": 3, "name": "Review"},
]

SAMPLE_BOOKMARKS = [
    {"id": 1, "page": 1, "tags": [1]},
    {"id": 2, "page": 50, "sura": 3, "ayah": 1, "tags": [1, 2]},
    {"id": 3, "page": 42, "tags": []},
    {"id": 4, "page": 42, "sura": 2, "ayah": 255, "tags": [2]},
    {"id": 5, "page": 604, "sura": 114, "ayah": 1, "tags": []},
]


def create_sample_tags() -> List[Tag]:
    """Create Tag objects from SAMPLE_TAGS."""
    return [Tag(**data) for data in SAMPLE_TAGS]


def create_sample_bookmarks() -> List[Bookmark]:
    """Create Bookmark objects from SAMPLE_BOOKMARKS, newest first."""
    bookmarks = []
    for offset, data in enumerate(SAMPLE_BOOKMARKS):
        bookmarks.append(
            Bookmark(
                id=data["id"],
                page=data["page"],
                sura=data.get("sura"),
                ayah=data.get("ayah"),
                timestamp=datetime(2024, 1, 10 - offset, 12, 0, 0),
                tags=list(data["tags"]),
            )
        )
    return bookmarks
