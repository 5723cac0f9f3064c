"""Aggregate counts and date range of the history database."""

from __future__ import annotations

from collections.abc import Callable
from typing import cast

from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.browser.timestamps import format_timestamp
from tabtrail.browser.types import HistoryStats
from tabtrail.tools.base import TextOutput, Tool, ToolRequest, ToolResponse
from tabtrail.tools.registry import HISTORY_ERROR_HINTS, ToolRegistration

DESCRIPTION = "Get statistics about Chrome history database including date ranges and total entries"


class HistoryStatsInput(ToolRequest):
    pass


class HistoryStatsTool(Tool[HistoryStatsInput, TextOutput]):
    name = "get_history_stats"
    description = DESCRIPTION
    InputModel = HistoryStatsInput
    OutputModel = TextOutput

    def __init__(self, provider: BrowserDataProvider) -> None:
        self.provider = provider

    def execute(self, request: HistoryStatsInput) -> TextOutput:
        return TextOutput(text=format_history_stats(self.provider.history_stats()))


def format_history_stats(stats: HistoryStats) -> str:
    return "\n".join(
        [
            "Chrome History Database Statistics:",
            "",
            "**Overview:**",
            f"- Total unique URLs: {stats.total_urls:,}",
            f"- Total visits: {stats.total_visits:,}",
            "",
            "**Date Range:**",
            f"- Earliest visit: {format_timestamp(stats.earliest_visit)}",
            f"- Latest visit: {format_timestamp(stats.latest_visit)}",
            "",
            "**Note:** This shows the full range of data available in your Chrome history database.",
            "If you're not seeing results for specific dates, they might be outside this range.",
        ]
    )


def tool_registrations(provider: BrowserDataProvider) -> list[ToolRegistration]:
    tool = HistoryStatsTool(provider)
    return [
        ToolRegistration(
            name=HistoryStatsTool.name,
            description=DESCRIPTION,
            input_model=HistoryStatsInput,
            output_model=TextOutput,
            handler=cast(Callable[[ToolRequest], ToolResponse], tool.execute),
            error_prefix="Error getting history statistics",
            error_hints=HISTORY_ERROR_HINTS,
        )
    ]


__all__ = ["HistoryStatsInput", "HistoryStatsTool", "format_history_stats", "tool_registrations"]
