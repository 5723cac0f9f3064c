"""Substring and date-range search over browser history."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import cast

from pydantic import Field

from tabtrail.browser.domains import extract_domain
from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.browser.timestamps import format_timestamp
from tabtrail.browser.types import HistoryEntry
from tabtrail.tools.base import TextOutput, Tool, ToolInputError, ToolRequest, ToolResponse
from tabtrail.tools.registry import HISTORY_ERROR_HINTS, ToolRegistration

DESCRIPTION = "Search browser history for specific terms or patterns"


class SearchHistoryInput(ToolRequest):
    query: str | None = Field(default=None, description="Search query to find in browser history")
    start_date: str | None = Field(default=None, description="Start date for search (YYYY-MM-DD format)")
    end_date: str | None = Field(default=None, description="End date for search (YYYY-MM-DD format)")
    limit: int = Field(default=50, ge=1, description="Maximum number of results to return")


class SearchHistoryTool(Tool[SearchHistoryInput, TextOutput]):
    name = "search_history"
    description = DESCRIPTION
    InputModel = SearchHistoryInput
    OutputModel = TextOutput

    def __init__(self, provider: BrowserDataProvider) -> None:
        self.provider = provider

    def execute(self, request: SearchHistoryInput) -> TextOutput:
        query = (request.query or "").strip()
        start_date = request.start_date or None
        end_date = request.end_date or None
        if not query and not start_date and not end_date:
            raise ToolInputError("Please provide either a search query or a date range (or both)")

        entries = self.provider.search_history(
            query or None,
            start_date=start_date,
            end_date=end_date,
            limit=request.limit,
        )
        return TextOutput(text=format_search_results(entries, query, start_date, end_date, request.limit))


def format_search_results(
    entries: Sequence[HistoryEntry],
    query: str,
    start_date: str | None,
    end_date: str | None,
    limit: int,
) -> str:
    lines = [f'Search results for "{query}":' if query else "Browsing history:", ""]
    date_range = None
    if start_date or end_date:
        date_range = f"Date range: {start_date or 'beginning'} to {end_date or 'present'}"

    if not entries:
        lines.append("No matching entries found in your browsing history.")
        if date_range:
            lines.append(date_range)
        return "\n".join(lines)

    for index, entry in enumerate(entries, start=1):
        lines.append(f"{index}. {entry.title or 'Untitled'}")
        lines.append(f"   URL: {entry.url}")
        lines.append(f"   Last visited: {format_timestamp(entry.last_visit)}")
        lines.append(f"   Visit count: {entry.visit_count}")
        domain = extract_domain(entry.url)
        if domain:
            lines.append(f"   Domain: {domain}")
        lines.append("")

    footer = f"Total results: {len(entries)}"
    if len(entries) == limit:
        footer += f" (limited to {limit} entries)"
    lines.append(footer)
    if date_range:
        lines.append(date_range)
    return "\n".join(lines)


def tool_registrations(provider: BrowserDataProvider) -> list[ToolRegistration]:
    tool = SearchHistoryTool(provider)
    return [
        ToolRegistration(
            name=SearchHistoryTool.name,
            description=DESCRIPTION,
            input_model=SearchHistoryInput,
            output_model=TextOutput,
            handler=cast(Callable[[ToolRequest], ToolResponse], tool.execute),
            error_prefix="Error searching history",
            error_hints=(*HISTORY_ERROR_HINTS, "Invalid date format (use YYYY-MM-DD)"),
        )
    ]


__all__ = [
    "SearchHistoryInput",
    "SearchHistoryTool",
    "format_search_results",
    "tool_registrations",
]
