"""
Tests for SQLiteBookmarkStore.

Tests cover:
- Schema creation
- Adding bookmarks, tags and tag assignments
- Reading with both sort orders
- Atomic bulk deletes
"""

import sqlite3
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from quran_bookmarks.core.bookmark_model import BookmarkModel
from quran_bookmarks.core.data_models import BookmarkRow, TagHeader
from quran_bookmarks.core.data_sources import (
    SORT_DATE_ADDED,
    SORT_LOCATION,
    BookmarkStore,
    SQLiteBookmarkStore,
)
from quran_bookmarks.utils.error_handler import (
    StorageConnectionError,
    StorageReadError,
    StorageWriteError,
)
from tests.fixtures.mock_utilities import MockSettings


@pytest.fixture
def populated_store(sqlite_store):
    """
    Store with three bookmarks and two tags.

    Bookmarks are added out of page order so the sort orders differ.
    """
    page_50 = sqlite_store.add_bookmark(page=50)
    ayah = sqlite_store.add_bookmark(page=42, sura=2, ayah=255)
    page_42 = sqlite_store.add_bookmark(page=42)
    favorites = sqlite_store.add_tag("Favorites")
    memorize = sqlite_store.add_tag("Memorize")
    sqlite_store.tag_bookmark(page_50, [favorites, memorize])
    sqlite_store.tag_bookmark(ayah, [memorize])

    # Spread the timestamps so date ordering is deterministic
    base = datetime(2024, 1, 1)
    with sqlite3.connect(str(sqlite_store.db_path)) as conn:
        for offset, bookmark_id in enumerate([ayah, page_42, page_50]):
            conn.execute(
                "UPDATE bookmarks SET added_date = ? WHERE id = ?",
                ((base + timedelta(days=offset)).isoformat(), bookmark_id),
            )
    return sqlite_store


class TestSchema:
    """Tests for database initialization."""

    def test_init_creates_tables(self, temp_db_path):
        """Test that initialization creates the schema."""
        SQLiteBookmarkStore(temp_db_path)

        conn = sqlite3.connect(str(temp_db_path))
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        conn.close()

        assert {"bookmarks", "tags", "bookmark_tag"} <= tables

    def test_reopen_keeps_data(self, temp_db_path):
        """Test reopening an existing database."""
        SQLiteBookmarkStore(temp_db_path).add_tag("Kept")

        assert [t.name for t in SQLiteBookmarkStore(temp_db_path).get_tags()] == ["Kept"]

    def test_unopenable_path(self, tmp_path):
        """Test a path in a missing directory raises StorageConnectionError."""
        with pytest.raises(StorageConnectionError):
            SQLiteBookmarkStore(tmp_path / "missing" / "dir" / "db.sqlite")

    def test_satisfies_protocol(self, sqlite_store):
        """Test the store is a BookmarkStore."""
        assert isinstance(sqlite_store, BookmarkStore)


class TestWrites:
    """Tests for adding bookmarks and tags."""

    def test_ids_are_positive(self, sqlite_store):
        """Test new ids start above zero."""
        assert sqlite_store.add_bookmark(page=1) > 0
        assert sqlite_store.add_tag("First") > 0

    def test_add_bookmark_is_idempotent(self, sqlite_store):
        """Test adding the same location twice returns the same id."""
        first = sqlite_store.add_bookmark(page=7, sura=2, ayah=30)
        second = sqlite_store.add_bookmark(page=7, sura=2, ayah=30)

        assert first == second
        assert len(sqlite_store.get_bookmarks()) == 1

    def test_page_and_ayah_on_same_page_are_distinct(self, sqlite_store):
        """Test a page bookmark and an ayah bookmark on one page coexist."""
        page_id = sqlite_store.add_bookmark(page=7)
        ayah_id = sqlite_store.add_bookmark(page=7, sura=2, ayah=30)

        assert page_id != ayah_id
        assert sqlite_store.get_bookmark_id(None, None, 7) == page_id
        assert sqlite_store.get_bookmark_id(2, 30, 7) == ayah_id
        assert sqlite_store.get_bookmark_id(2, 31, 7) is None

    def test_duplicate_tag_names_allowed(self, sqlite_store):
        """Test tag names do not have to be unique."""
        sqlite_store.add_tag("Same")
        sqlite_store.add_tag("Same")

        assert len(sqlite_store.get_tags()) == 2

    def test_update_tag(self, sqlite_store):
        """Test renaming a tag."""
        tag_id = sqlite_store.add_tag("Old")

        assert sqlite_store.update_tag(tag_id, "New") is True
        assert sqlite_store.update_tag(999, "Nope") is False
        assert sqlite_store.get_tags()[0].name == "New"

    def test_tag_bookmark_twice(self, sqlite_store):
        """Test repeating a tag assignment does not duplicate it."""
        bookmark_id = sqlite_store.add_bookmark(page=3)
        tag_id = sqlite_store.add_tag("Once")
        sqlite_store.tag_bookmark(bookmark_id, [tag_id])
        sqlite_store.tag_bookmark(bookmark_id, [tag_id])

        assert sqlite_store.get_bookmarks()[0].tags == [tag_id]


class TestReads:
    """Tests for reading bookmarks and tags."""

    def test_sort_by_date_added(self, populated_store):
        """Test newest bookmarks come first."""
        bookmarks = populated_store.get_bookmarks(SORT_DATE_ADDED)

        assert [(b.page, b.sura) for b in bookmarks] == [(50, None), (42, None), (42, 2)]

    def test_sort_by_location(self, populated_store):
        """Test location order is page, then page bookmark before ayahs."""
        bookmarks = populated_store.get_bookmarks(SORT_LOCATION)

        assert [(b.page, b.sura) for b in bookmarks] == [(42, None), (42, 2), (50, None)]
        assert bookmarks[0].is_page_bookmark
        assert not bookmarks[1].is_page_bookmark

    def test_unknown_sort_order_falls_back(self, populated_store):
        """Test unknown sort orders use date added."""
        assert [b.id for b in populated_store.get_bookmarks(99)] == [
            b.id for b in populated_store.get_bookmarks(SORT_DATE_ADDED)
        ]

    def test_tags_attached(self, populated_store):
        """Test bookmarks carry their tag ids."""
        by_page = {
            (b.page, b.sura): b for b in populated_store.get_bookmarks(SORT_LOCATION)
        }

        assert sorted(by_page[(50, None)].tags) == [1, 2]
        assert by_page[(42, 2)].tags == [2]
        assert by_page[(42, None)].tags == []

    def test_timestamps_parsed(self, populated_store):
        """Test added dates come back as datetimes."""
        bookmark = populated_store.get_bookmarks(SORT_LOCATION)[-1]

        assert bookmark.timestamp == datetime(2024, 1, 3)

    def test_tags_ordered_by_name(self, sqlite_store):
        """Test tags are returned alphabetically."""
        sqlite_store.add_tag("Zeta")
        sqlite_store.add_tag("Alpha")

        assert [t.name for t in sqlite_store.get_tags()] == ["Alpha", "Zeta"]

    def test_read_error_wrapped(self, sqlite_store):
        """Test sqlite errors become StorageReadError."""
        with sqlite3.connect(str(sqlite_store.db_path)) as conn:
            conn.execute("DROP TABLE tags")

        with pytest.raises(StorageReadError) as exc_info:
            sqlite_store.get_tags()

        assert isinstance(exc_info.value.original_error, sqlite3.Error)


class TestBulkDelete:
    """Tests for bulk_delete."""

    def test_untag_keeps_bookmark(self, populated_store):
        """Test removing an association leaves the bookmark and tag."""
        bookmark = populated_store.get_bookmarks(SORT_LOCATION)[-1]

        populated_store.bulk_delete([], [], [(bookmark.id, 1)])

        after = populated_store.get_bookmarks(SORT_LOCATION)[-1]
        assert after.id == bookmark.id
        assert after.tags == [2]
        assert len(populated_store.get_tags()) == 2

    def test_delete_tag_drops_associations(self, populated_store):
        """Test deleting a tag removes it from every bookmark."""
        populated_store.bulk_delete([2], [], [])

        assert [t.id for t in populated_store.get_tags()] == [1]
        assert all(2 not in b.tags for b in populated_store.get_bookmarks())

    def test_delete_bookmark_drops_associations(self, populated_store):
        """Test deleting a bookmark removes its tag rows."""
        bookmark = populated_store.get_bookmarks(SORT_LOCATION)[-1]

        populated_store.bulk_delete([], [bookmark.id], [])

        assert bookmark.id not in [b.id for b in populated_store.get_bookmarks()]
        with sqlite3.connect(str(populated_store.db_path)) as conn:
            count = conn.execute(
                "SELECT COUNT(*) FROM bookmark_tag WHERE bookmark_id = ?",
                (bookmark.id,),
            ).fetchone()[0]
        assert count == 0

    def test_duplicates_harmless(self, populated_store):
        """Test repeated ids in one batch do not fail."""
        populated_store.bulk_delete([1, 1], [3, 3], [(1, 2), (1, 2)])

        assert [t.id for t in populated_store.get_tags()] == [2]
        assert 3 not in [b.id for b in populated_store.get_bookmarks()]

    def test_failure_rolls_back(self, populated_store):
        """Test a failing statement leaves the store unchanged."""
        before_tags = populated_store.get_tags()
        before_bookmarks = populated_store.get_bookmarks(SORT_LOCATION)

        # A non-scalar parameter fails the bookmark delete after the tag delete ran
        with pytest.raises(StorageWriteError):
            populated_store.bulk_delete([1], [object()], [])

        assert populated_store.get_tags() == before_tags
        assert populated_store.get_bookmarks(SORT_LOCATION) == before_bookmarks


class TestWithBookmarkModel:
    """Tests for BookmarkModel on top of the SQLite store."""

    def test_fetch_and_remove(self, populated_store):
        """Test rows fetched from SQLite can be removed again."""
        model = BookmarkModel(populated_store, MockSettings(last_page=50))

        result = model.fetch(SORT_LOCATION, group_by_tags=True)
        selected = [
            row
            for row in result.rows
            if (isinstance(row, TagHeader) and row.tag_name == "Favorites")
            or (isinstance(row, BookmarkRow) and row.tag_id is None)
        ]
        model.remove_rows(selected)

        assert [t.name for t in populated_store.get_tags()] == ["Memorize"]
        assert len(populated_store.get_bookmarks()) == 2

    def test_write_error_from_model(self, populated_store):
        """Test a failed bulk delete surfaces as StorageWriteError."""
        model = BookmarkModel(populated_store, MockSettings())

        with patch.object(
            SQLiteBookmarkStore,
            "_get_connection",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            with pytest.raises(StorageWriteError):
                model.remove_rows([TagHeader(tag_id=1, tag_name="Favorites")])
