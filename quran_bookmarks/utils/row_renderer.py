"""
Terminal rendering of bookmark rows with Rich.
"""

from typing import Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.data_models import (
    AyahBookmarksHeader,
    BookmarkResult,
    BookmarkRow,
    CurrentPage,
    CurrentPageHeader,
    PageBookmarksHeader,
    Row,
    Tag,
    TagHeader,
    UntaggedHeader,
)

HEADER_STYLE = "bold cyan"


def describe_row(row: Row, tag_map: Dict[int, Tag]) -> Text:
    """Get the display text of one row."""
    if isinstance(row, CurrentPageHeader):
        return Text("Current Page", style=HEADER_STYLE)
    if isinstance(row, CurrentPage):
        return Text(f"Page {row.page}")
    if isinstance(row, TagHeader):
        return Text(row.tag_name, style=HEADER_STYLE)
    if isinstance(row, UntaggedHeader):
        return Text("Not Tagged", style=HEADER_STYLE)
    if isinstance(row, PageBookmarksHeader):
        return Text("Page Bookmarks", style=HEADER_STYLE)
    if isinstance(row, AyahBookmarksHeader):
        return Text("Ayah Bookmarks", style=HEADER_STYLE)

    bookmark = row.bookmark
    text = Text(f"  {bookmark.get_location()}")
    if not bookmark.is_page_bookmark:
        text.append(f" (page {bookmark.page})", style="dim")
    names = [tag_map[tag_id].name for tag_id in bookmark.tags if tag_id in tag_map]
    if names and row.tag_id is None:
        text.append(f"  [{', '.join(names)}]", style="magenta")
    return text


def build_table(result: BookmarkResult) -> Table:
    """Build a Rich table with one line per row."""
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Bookmark", no_wrap=True)
    table.add_column("Id", justify="right", style="dim")
    table.add_column("Tag", justify="right", style="dim")

    for row in result.rows:
        bookmark_id = ""
        tag_id = ""
        if isinstance(row, BookmarkRow):
            bookmark_id = str(row.bookmark_id)
            tag_id = "" if row.tag_id is None else str(row.tag_id)
        elif isinstance(row, TagHeader):
            tag_id = str(row.tag_id)
        table.add_row(describe_row(row, result.tag_map), bookmark_id, tag_id)
    return table


def render_rows(result: BookmarkResult, console: Optional[Console] = None) -> None:
    """Print the bookmark list to the terminal."""
    console = console or Console()
    if not result.rows:
        console.print("No bookmarks yet.")
        return
    console.print(build_table(result))
