"""Visit-level listing of recent browsing activity."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import cast

from pydantic import Field

from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.browser.timestamps import format_timestamp
from tabtrail.browser.types import RecentVisit
from tabtrail.tools.base import TextOutput, Tool, ToolRequest, ToolResponse
from tabtrail.tools.registry import HISTORY_ERROR_HINTS, ToolRegistration

DESCRIPTION = "Shows browsing activity from the last 24 hours with visit counts and timestamps"


class RecentBrowsingInput(ToolRequest):
    hours: int = Field(default=24, ge=1, le=168, description="Number of hours to look back (default: 24)")
    limit: int = Field(default=50, ge=1, le=500, description="Maximum number of results to return")
    include_visit_details: bool = Field(
        default=True, description="Include detailed visit information like visit count"
    )


class RecentBrowsingTool(Tool[RecentBrowsingInput, TextOutput]):
    name = "get_recent_browsing"
    description = DESCRIPTION
    InputModel = RecentBrowsingInput
    OutputModel = TextOutput

    def __init__(self, provider: BrowserDataProvider) -> None:
        self.provider = provider

    def execute(self, request: RecentBrowsingInput) -> TextOutput:
        visits = self.provider.recent_browsing(request.hours, request.limit, request.include_visit_details)
        text = format_recent_browsing(visits, request.hours, request.limit, request.include_visit_details)
        return TextOutput(text=text)


def format_recent_browsing(visits: Sequence[RecentVisit], hours: int, limit: int, include_details: bool) -> str:
    lines = [f"Recent browsing activity (last {hours} hours):", ""]
    if not visits:
        lines.append("No browsing activity found in the specified timeframe.")
        return "\n".join(lines)

    for index, visit in enumerate(visits, start=1):
        lines.append(f"{index}. {visit.title or 'Untitled'}")
        lines.append(f"   URL: {visit.url}")
        lines.append(f"   Last visited: {format_timestamp(visit.visit_time)}")
        if include_details:
            lines.append(f"   Visit count: {visit.visit_count}")
            if visit.domain:
                lines.append(f"   Domain: {visit.domain}")
        lines.append("")

    footer = f"Total entries: {len(visits)}"
    if len(visits) == limit:
        footer += f" (limited to {limit} results)"
    lines.append(footer)
    return "\n".join(lines)


def tool_registrations(provider: BrowserDataProvider) -> list[ToolRegistration]:
    tool = RecentBrowsingTool(provider)
    return [
        ToolRegistration(
            name=RecentBrowsingTool.name,
            description=DESCRIPTION,
            input_model=RecentBrowsingInput,
            output_model=TextOutput,
            handler=cast(Callable[[ToolRequest], ToolResponse], tool.execute),
            error_prefix="Error retrieving recent browsing activity",
            error_hints=HISTORY_ERROR_HINTS,
        )
    ]


__all__ = [
    "RecentBrowsingInput",
    "RecentBrowsingTool",
    "format_recent_browsing",
    "tool_registrations",
]
