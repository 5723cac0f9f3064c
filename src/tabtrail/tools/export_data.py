"""Export history and bookmarks as JSON, CSV or HTML text."""

from __future__ import annotations

import csv
import html
import io
import json
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any, Literal, cast

from pydantic import Field

from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.browser.timestamps import format_timestamp
from tabtrail.browser.types import Bookmark, HistoryEntry
from tabtrail.tools.base import TextOutput, Tool, ToolInputError, ToolRequest, ToolResponse
from tabtrail.tools.registry import BOOKMARK_ERROR_HINTS, HISTORY_ERROR_HINTS, ToolRegistration

DESCRIPTION = "Export browser history and bookmarks to various formats"

EXPORT_HISTORY_LIMIT = 1000
CSV_COLUMNS = ("record_type", "title", "url", "folder", "visit_count", "last_visit", "date_added")

ExportFormat = Literal["json", "csv", "html"]


class ExportDataInput(ToolRequest):
    format: ExportFormat = Field(default="json", description="Export format")
    include_history: bool = Field(default=True, description="Include browsing history in export")
    include_bookmarks: bool = Field(default=True, description="Include bookmarks in export")


class ExportDataTool(Tool[ExportDataInput, TextOutput]):
    name = "export_data"
    description = DESCRIPTION
    InputModel = ExportDataInput
    OutputModel = TextOutput

    def __init__(self, provider: BrowserDataProvider) -> None:
        self.provider = provider

    def execute(self, request: ExportDataInput) -> TextOutput:
        if not request.include_history and not request.include_bookmarks:
            raise ToolInputError("Nothing to export: enable include_history and/or include_bookmarks")

        history = self.provider.recent_history(EXPORT_HISTORY_LIMIT) if request.include_history else None
        bookmarks = self.provider.get_bookmarks() if request.include_bookmarks else None
        exported_at = datetime.now(UTC)

        renderers: dict[str, Callable[..., str]] = {
            "json": render_json,
            "csv": render_csv,
            "html": render_html,
        }
        body = renderers[request.format](history, bookmarks, exported_at)

        summary = [f"Exported browser data ({request.format.upper()} format)"]
        if history is not None:
            summary.append(f"- History entries: {len(history):,} (most recent, up to {EXPORT_HISTORY_LIMIT:,})")
        if bookmarks is not None:
            summary.append(f"- Bookmarks: {len(bookmarks):,}")
        return TextOutput(text="\n".join(summary) + "\n\n" + body)


def _history_row(entry: HistoryEntry) -> dict[str, Any]:
    return {
        "url": entry.url,
        "title": entry.title or "",
        "visit_count": entry.visit_count,
        "last_visit": format_timestamp(entry.last_visit, missing=""),
    }


def _bookmark_row(bookmark: Bookmark) -> dict[str, Any]:
    return {
        "title": bookmark.title,
        "url": bookmark.url,
        "folder": bookmark.folder,
        "date_added": format_timestamp(bookmark.date_added, missing=""),
    }


def render_json(
    history: Sequence[HistoryEntry] | None,
    bookmarks: Sequence[Bookmark] | None,
    exported_at: datetime,
) -> str:
    document: dict[str, Any] = {"exported_at": exported_at.isoformat()}
    if history is not None:
        document["history"] = [_history_row(entry) for entry in history]
    if bookmarks is not None:
        document["bookmarks"] = [_bookmark_row(bookmark) for bookmark in bookmarks]
    return json.dumps(document, indent=2, ensure_ascii=False)


def render_csv(
    history: Sequence[HistoryEntry] | None,
    bookmarks: Sequence[Bookmark] | None,
    exported_at: datetime,
) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for entry in history or ():
        writer.writerow({"record_type": "history", **_history_row(entry)})
    for bookmark in bookmarks or ():
        writer.writerow({"record_type": "bookmark", **_bookmark_row(bookmark)})
    return buffer.getvalue()


def render_html(
    history: Sequence[HistoryEntry] | None,
    bookmarks: Sequence[Bookmark] | None,
    exported_at: datetime,
) -> str:
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        '<head><meta charset="utf-8"><title>Browser data export</title></head>',
        "<body>",
        "<h1>Browser data export</h1>",
        f"<p>Exported at {html.escape(exported_at.isoformat())}</p>",
    ]
    if history is not None:
        parts.append("<h2>History</h2>")
        parts.append(
            _html_table(
                ("Title", "URL", "Visits", "Last visit"),
                [
                    (row["title"], row["url"], str(row["visit_count"]), row["last_visit"])
                    for row in map(_history_row, history)
                ],
            )
        )
    if bookmarks is not None:
        parts.append("<h2>Bookmarks</h2>")
        parts.append(
            _html_table(
                ("Title", "URL", "Folder", "Added"),
                [(row["title"], row["url"], row["folder"], row["date_added"]) for row in map(_bookmark_row, bookmarks)],
            )
        )
    parts.extend(["</body>", "</html>"])
    return "\n".join(parts)


def _html_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    head = "".join(f"<th>{html.escape(cell)}</th>" for cell in headers)
    body = []
    for row in rows:
        cells = []
        for position, cell in enumerate(row):
            escaped = html.escape(cell)
            # second column is always the URL
            if position == 1 and cell:
                escaped = f'<a href="{escaped}">{escaped}</a>'
            cells.append(f"<td>{escaped}</td>")
        body.append(f"<tr>{''.join(cells)}</tr>")
    return f"<table>\n<tr>{head}</tr>\n" + "\n".join(body) + "\n</table>"


def tool_registrations(provider: BrowserDataProvider) -> list[ToolRegistration]:
    tool = ExportDataTool(provider)
    return [
        ToolRegistration(
            name=ExportDataTool.name,
            description=DESCRIPTION,
            input_model=ExportDataInput,
            output_model=TextOutput,
            handler=cast(Callable[[ToolRequest], ToolResponse], tool.execute),
            error_prefix="Error exporting data",
            error_hints=tuple(dict.fromkeys((*HISTORY_ERROR_HINTS, *BOOKMARK_ERROR_HINTS))),
        )
    ]


__all__ = [
    "EXPORT_HISTORY_LIMIT",
    "ExportDataInput",
    "ExportDataTool",
    "render_csv",
    "render_html",
    "render_json",
    "tool_registrations",
]
