"""
Command-line interface for Quran Bookmarks.

This module provides the CLI for listing bookmarks, adding bookmarks and
tags, and removing them through the same row selection the list shows.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console

from quran_bookmarks import __version__
from quran_bookmarks.config.configuration import Configuration
from quran_bookmarks.config.pydantic_config import ConfigurationManager
from quran_bookmarks.core.bookmark_model import BookmarkModel, classify_rows
from quran_bookmarks.core.data_models import (
    PAGES_FIRST,
    PAGES_LAST,
    BookmarkRow,
    Row,
    TagHeader,
)
from quran_bookmarks.core.data_sources.sqlite_store import SQLiteBookmarkStore
from quran_bookmarks.core.settings import ReaderSettings
from quran_bookmarks.utils.error_handler import (
    ConfigurationError,
    StorageError,
    user_message,
)
from quran_bookmarks.utils.logging_setup import setup_logging
from quran_bookmarks.utils.row_renderer import render_rows

logger = logging.getLogger(__name__)


def page_number(value: str) -> int:
    """argparse type for a page inside the mushaf."""
    try:
        page = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a page number")
    if page < PAGES_FIRST or page > PAGES_LAST:
        raise argparse.ArgumentTypeError(
            f"Page must be between {PAGES_FIRST} and {PAGES_LAST}, got {page}"
        )
    return page


def positive_int(value: str) -> int:
    """argparse type for ids, suras and ayahs."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number")
    if number < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive number, got {number}")
    return number


class CLIInterface:
    """Command line interface for the bookmark list."""

    # Commands whose failures have a dedicated user message
    OPERATIONS = {
        "list": "fetch",
        "untag": "remove",
        "delete-bookmark": "remove",
        "delete-tag": "remove",
        "set-last-page": "save",
    }

    def __init__(self, console: Optional[Console] = None):
        self.parser = self._create_parser()
        self.console = console or Console()
        self.error_console = Console(stderr=True)

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            prog="quran-bookmarks",
            description="Quran Bookmarks - list, tag and remove reader bookmarks",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  quran-bookmarks add-page 42
  quran-bookmarks add-ayah 2 255 42
  quran-bookmarks add-tag "Favorites"
  quran-bookmarks rename-tag 1 "To Memorize"
  quran-bookmarks tag 1 1
  quran-bookmarks list --group-by-tags
  quran-bookmarks list --sort location
  quran-bookmarks untag 1 1
  quran-bookmarks delete-bookmark 1 2
  quran-bookmarks delete-tag 1

Configuration:
  Settings are read from quran_bookmarks.toml (or .json) in the current
  directory, or from the file given with --config. The environment
  variables QURAN_BOOKMARKS_DB and QURAN_BOOKMARKS_SETTINGS override the
  storage paths.
            """,
        )

        parser.add_argument(
            "--version", "-V", action="version", version=f"%(prog)s {__version__}"
        )
        parser.add_argument(
            "--config", "-c", type=Path, help="Configuration file (TOML or JSON)"
        )
        parser.add_argument("--database", "-d", help="SQLite database file")
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable debug logging"
        )
        parser.add_argument(
            "--create-config",
            type=Path,
            metavar="PATH",
            help="Write a configuration template to PATH and exit",
        )

        subparsers = parser.add_subparsers(dest="command")

        list_parser = subparsers.add_parser("list", help="Show the bookmark list")
        list_parser.add_argument(
            "--group-by-tags",
            "-g",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Group by tag (overrides the configuration file)",
        )
        list_parser.add_argument(
            "--sort",
            dest="sort_order",
            choices=["date_added", "location"],
            help="Bookmark ordering",
        )

        add_page = subparsers.add_parser("add-page", help="Bookmark a page")
        add_page.add_argument("page", type=page_number)

        add_ayah = subparsers.add_parser("add-ayah", help="Bookmark an ayah")
        add_ayah.add_argument("sura", type=positive_int)
        add_ayah.add_argument("ayah", type=positive_int)
        add_ayah.add_argument("page", type=page_number)

        add_tag = subparsers.add_parser("add-tag", help="Create a tag")
        add_tag.add_argument("name")

        rename_tag = subparsers.add_parser("rename-tag", help="Rename a tag")
        rename_tag.add_argument("tag_id", type=positive_int)
        rename_tag.add_argument("name")

        tag = subparsers.add_parser("tag", help="Attach tags to a bookmark")
        tag.add_argument("bookmark_id", type=positive_int)
        tag.add_argument("tag_ids", type=positive_int, nargs="+")

        untag = subparsers.add_parser("untag", help="Remove a tag from a bookmark")
        untag.add_argument("bookmark_id", type=positive_int)
        untag.add_argument("tag_id", type=positive_int)

        delete_bookmark = subparsers.add_parser(
            "delete-bookmark", help="Delete bookmarks"
        )
        delete_bookmark.add_argument("bookmark_ids", type=positive_int, nargs="+")

        delete_tag = subparsers.add_parser("delete-tag", help="Delete tags")
        delete_tag.add_argument("tag_ids", type=positive_int, nargs="+")

        last_page = subparsers.add_parser(
            "set-last-page", help="Save the last visited page"
        )
        last_page.add_argument("page", type=page_number)

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Parse arguments and run the requested command.

        Returns:
            Process exit code
        """
        args = self.parser.parse_args(argv)

        if args.create_config:
            ConfigurationManager.create_sample_config(args.create_config)
            self.console.print(f"Configuration template written to {args.create_config}")
            return 0

        try:
            configuration = Configuration(args.config)
            configuration.update_from_args(vars(args))
        except ConfigurationError as e:
            self.error_console.print(str(e), style="red", markup=False)
            return 1

        setup_logging(configuration.log_level)

        if not args.command:
            self.parser.print_help()
            return 0

        try:
            store = SQLiteBookmarkStore(configuration.database_path)
            settings = ReaderSettings(configuration.settings_path)
            model = BookmarkModel(store, settings)
            handler = self._handlers()[args.command]
            return handler(args, configuration, store, settings, model)
        except StorageError as e:
            operation = self.OPERATIONS.get(args.command, args.command)
            logger.debug("Command failed", exc_info=True)
            self.error_console.print(user_message(operation, e), style="red", markup=False)
            return 1

    def _handlers(self) -> dict:
        return {
            "list": self._list,
            "add-page": self._add_page,
            "add-ayah": self._add_ayah,
            "add-tag": self._add_tag,
            "rename-tag": self._rename_tag,
            "tag": self._tag,
            "untag": self._untag,
            "delete-bookmark": self._delete_bookmark,
            "delete-tag": self._delete_tag,
            "set-last-page": self._set_last_page,
        }

    # ============ Commands ============

    def _list(self, args, configuration, store, settings, model) -> int:
        result = model.fetch(configuration.sort_order, configuration.group_by_tags)
        render_rows(result, self.console)
        return 0

    def _add_page(self, args, configuration, store, settings, model) -> int:
        bookmark_id = store.add_bookmark(page=args.page)
        self.console.print(f"Bookmark {bookmark_id}: Page {args.page}")
        return 0

    def _add_ayah(self, args, configuration, store, settings, model) -> int:
        bookmark_id = store.add_bookmark(page=args.page, sura=args.sura, ayah=args.ayah)
        self.console.print(
            f"Bookmark {bookmark_id}: Sura {args.sura}, Ayah {args.ayah}"
        )
        return 0

    def _add_tag(self, args, configuration, store, settings, model) -> int:
        tag_id = store.add_tag(args.name)
        self.console.print(f"Tag {tag_id}: {args.name}")
        return 0

    def _rename_tag(self, args, configuration, store, settings, model) -> int:
        if not store.update_tag(args.tag_id, args.name):
            self.error_console.print(f"No tag with id {args.tag_id}", style="yellow")
            return 1
        self.console.print(f"Tag {args.tag_id}: {args.name}")
        return 0

    def _tag(self, args, configuration, store, settings, model) -> int:
        store.tag_bookmark(args.bookmark_id, args.tag_ids)
        return 0

    def _set_last_page(self, args, configuration, store, settings, model) -> int:
        settings.set_last_page(args.page)
        return 0

    def _untag(self, args, configuration, store, settings, model) -> int:
        return self._remove_selected(
            model,
            configuration,
            group_by_tags=True,
            selector=lambda row: isinstance(row, BookmarkRow)
            and row.bookmark_id == args.bookmark_id
            and row.tag_id == args.tag_id,
        )

    def _delete_bookmark(self, args, configuration, store, settings, model) -> int:
        ids = set(args.bookmark_ids)
        return self._remove_selected(
            model,
            configuration,
            group_by_tags=False,
            selector=lambda row: isinstance(row, BookmarkRow)
            and row.bookmark_id in ids,
        )

    def _delete_tag(self, args, configuration, store, settings, model) -> int:
        ids = set(args.tag_ids)
        return self._remove_selected(
            model,
            configuration,
            group_by_tags=True,
            selector=lambda row: isinstance(row, TagHeader) and row.tag_id in ids,
        )

    def _remove_selected(
        self,
        model: BookmarkModel,
        configuration: Configuration,
        group_by_tags: bool,
        selector: Callable[[Row], bool],
    ) -> int:
        """Select rows from the list the way a reader would and remove them."""
        result = model.fetch(configuration.sort_order, group_by_tags)
        selected = [row for row in result.rows if selector(row)]
        if classify_rows(selected).is_empty:
            self.error_console.print("[yellow]Nothing matched; nothing removed.[/yellow]")
            return 1
        batch = model.remove_rows(selected)
        self.console.print(
            f"Removed {len(batch.tag_ids)} tag(s), {len(batch.bookmark_ids)} "
            f"bookmark(s), {len(batch.untag)} tag assignment(s)"
        )
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    return CLIInterface().run(argv)


if __name__ == "__main__":
    sys.exit(main())
