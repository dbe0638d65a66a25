"""
Pytest configuration and shared fixtures for quran bookmarks tests.

This module provides the sample data, mock collaborators and temporary
storage shared across test modules.
"""

from pathlib import Path
from typing import List

import pytest

from quran_bookmarks.core.bookmark_model import BookmarkModel
from quran_bookmarks.core.data_models import Bookmark, Tag
from quran_bookmarks.core.data_sources.sqlite_store import SQLiteBookmarkStore
from quran_bookmarks.core.settings import ReaderSettings
from tests.fixtures.mock_utilities import MockBookmarkStore, MockSettings
from tests.fixtures.test_data import create_sample_bookmarks, create_sample_tags


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def sample_tags() -> List[Tag]:
    """Sample tags in display order."""
    return create_sample_tags()


@pytest.fixture
def sample_bookmarks() -> List[Bookmark]:
    """Sample page and ayah bookmarks, some tagged."""
    return create_sample_bookmarks()


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def mock_store(sample_tags, sample_bookmarks) -> MockBookmarkStore:
    """In-memory store holding the sample data."""
    return MockBookmarkStore(tags=sample_tags, bookmarks=sample_bookmarks)


@pytest.fixture
def mock_settings() -> MockSettings:
    """Settings with no saved page."""
    return MockSettings()


@pytest.fixture
def model(mock_store, mock_settings) -> BookmarkModel:
    """BookmarkModel wired to the mock collaborators."""
    return BookmarkModel(mock_store, mock_settings)


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def temp_db_path(tmp_path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test_bookmarks.db"


@pytest.fixture
def sqlite_store(temp_db_path) -> SQLiteBookmarkStore:
    """Create an empty SQLiteBookmarkStore."""
    return SQLiteBookmarkStore(temp_db_path)


@pytest.fixture
def reader_settings(tmp_path) -> ReaderSettings:
    """Create ReaderSettings backed by a temporary file."""
    return ReaderSettings(tmp_path / "settings.json")
