"""Bookmark listing grouped by folder path."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import cast

from pydantic import Field

from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.browser.timestamps import format_timestamp
from tabtrail.browser.types import Bookmark
from tabtrail.tools.base import TextOutput, Tool, ToolRequest, ToolResponse
from tabtrail.tools.registry import BOOKMARK_ERROR_HINTS, ToolRegistration

DESCRIPTION = "Retrieve and analyze browser bookmarks"


class GetBookmarksInput(ToolRequest):
    folder: str | None = Field(default=None, description="Specific bookmark folder to search (optional)")
    include_urls: bool = Field(default=True, description="Whether to include full URLs in results")


class GetBookmarksTool(Tool[GetBookmarksInput, TextOutput]):
    name = "get_bookmarks"
    description = DESCRIPTION
    InputModel = GetBookmarksInput
    OutputModel = TextOutput

    def __init__(self, provider: BrowserDataProvider) -> None:
        self.provider = provider

    def execute(self, request: GetBookmarksInput) -> TextOutput:
        folder = (request.folder or "").strip() or None
        bookmarks = self.provider.get_bookmarks(folder)
        return TextOutput(text=format_bookmarks(bookmarks, folder, request.include_urls))


def format_bookmarks(bookmarks: Sequence[Bookmark], folder: str | None, include_urls: bool) -> str:
    header = f'Bookmarks in folders matching "{folder}":' if folder else "Bookmarks:"
    lines = [header, ""]
    if not bookmarks:
        lines.append("No bookmarks found.")
        return "\n".join(lines)

    # folders in traversal order
    grouped: dict[str, list[Bookmark]] = {}
    for bookmark in bookmarks:
        grouped.setdefault(bookmark.folder, []).append(bookmark)

    for folder_path, items in grouped.items():
        lines.append(f"Folder: {folder_path} ({len(items)})")
        for index, bookmark in enumerate(items, start=1):
            lines.append(f"  {index}. {bookmark.title or 'Untitled'}")
            if include_urls:
                lines.append(f"     URL: {bookmark.url}")
            if bookmark.date_added is not None:
                lines.append(f"     Added: {format_timestamp(bookmark.date_added)}")
        lines.append("")

    lines.append(f"Total bookmarks: {len(bookmarks)} in {len(grouped)} folders")
    return "\n".join(lines)


def tool_registrations(provider: BrowserDataProvider) -> list[ToolRegistration]:
    tool = GetBookmarksTool(provider)
    return [
        ToolRegistration(
            name=GetBookmarksTool.name,
            description=DESCRIPTION,
            input_model=GetBookmarksInput,
            output_model=TextOutput,
            handler=cast(Callable[[ToolRequest], ToolResponse], tool.execute),
            error_prefix="Error reading bookmarks",
            error_hints=BOOKMARK_ERROR_HINTS,
        )
    ]


__all__ = ["GetBookmarksInput", "GetBookmarksTool", "format_bookmarks", "tool_registrations"]
