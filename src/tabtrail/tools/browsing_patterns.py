"""Visit-frequency analysis over a recent timeframe.

Hours and weekdays are bucketed in UTC, matching the timestamps shown by the
other history tools.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Literal, cast

from pydantic import Field

from tabtrail.browser.domains import extract_domain
from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.browser.types import HistoryEntry, VisitRecord
from tabtrail.tools.base import TextOutput, Tool, ToolRequest, ToolResponse
from tabtrail.tools.registry import HISTORY_ERROR_HINTS, ToolRegistration

DESCRIPTION = "Analyze browsing patterns and generate insights"

Timeframe = Literal["day", "week", "month", "year"]

TIMEFRAME_DAYS: dict[str, int] = {"day": 1, "week": 7, "month": 30, "year": 365}
TOP_N = 10
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class BrowsingPatternsInput(ToolRequest):
    timeframe: Timeframe = Field(default="week", description="Timeframe for analysis")
    include_domains: bool = Field(default=True, description="Include domain-level analysis")


@dataclass(slots=True)
class PatternSummary:
    timeframe: str
    days: int
    total_visits: int = 0
    unique_pages: int = 0
    hours: Counter[int] = field(default_factory=Counter)
    weekdays: Counter[int] = field(default_factory=Counter)
    pages: Counter[str] = field(default_factory=Counter)
    titles: dict[str, str] = field(default_factory=dict)
    domains: Counter[str] = field(default_factory=Counter)
    all_time: list[HistoryEntry] = field(default_factory=list)


def summarize_visits(visits: Sequence[VisitRecord], timeframe: str) -> PatternSummary:
    summary = PatternSummary(timeframe=timeframe, days=TIMEFRAME_DAYS[timeframe])
    for visit in visits:
        summary.total_visits += 1
        summary.pages[visit.url] += 1
        if visit.title and visit.url not in summary.titles:
            summary.titles[visit.url] = visit.title
        if visit.visit_time is not None:
            moment = visit.visit_time.astimezone(UTC)
            summary.hours[moment.hour] += 1
            summary.weekdays[moment.weekday()] += 1
        domain = extract_domain(visit.url)
        if domain:
            summary.domains[domain] += 1
    summary.unique_pages = len(summary.pages)
    return summary


class BrowsingPatternsTool(Tool[BrowsingPatternsInput, TextOutput]):
    name = "analyze_browsing_patterns"
    description = DESCRIPTION
    InputModel = BrowsingPatternsInput
    OutputModel = TextOutput

    def __init__(self, provider: BrowserDataProvider) -> None:
        self.provider = provider

    def execute(self, request: BrowsingPatternsInput) -> TextOutput:
        now = datetime.now(UTC)
        start = now - timedelta(days=TIMEFRAME_DAYS[request.timeframe])
        visits = self.provider.visits_between(start, now)
        summary = summarize_visits(visits, request.timeframe)
        if summary.total_visits:
            summary.all_time = self.provider.most_visited(TOP_N)
        return TextOutput(text=format_patterns(summary, request.include_domains))


def format_patterns(summary: PatternSummary, include_domains: bool) -> str:
    lines = [f"Browsing patterns for the last {summary.timeframe} ({summary.days} days):", ""]
    if summary.total_visits == 0:
        lines.append("No browsing activity found in the specified timeframe.")
        return "\n".join(lines)

    lines.extend(
        [
            "**Overview:**",
            f"- Total visits: {summary.total_visits:,}",
            f"- Unique pages: {summary.unique_pages:,}",
            f"- Average visits per day: {summary.total_visits / summary.days:,.1f}",
            "",
        ]
    )

    if summary.hours:
        lines.append("**Busiest hours (UTC):**")
        for hour, count in summary.hours.most_common(3):
            lines.append(f"- {hour:02d}:00-{hour:02d}:59: {count:,} visits")
        lines.append("")

    if summary.weekdays:
        lines.append("**Busiest days:**")
        for weekday, count in summary.weekdays.most_common(3):
            lines.append(f"- {WEEKDAYS[weekday]}: {count:,} visits")
        lines.append("")

    lines.append("**Most visited pages:**")
    for index, (url, count) in enumerate(summary.pages.most_common(TOP_N), start=1):
        title = summary.titles.get(url) or "Untitled"
        lines.append(f"{index}. {title} ({count:,} visits)")
        lines.append(f"   URL: {url}")

    if include_domains and summary.domains:
        lines.append("")
        lines.append("**Top domains:**")
        for index, (domain, count) in enumerate(summary.domains.most_common(TOP_N), start=1):
            share = count / summary.total_visits * 100
            lines.append(f"{index}. {domain}: {count:,} visits ({share:.1f}%)")

    if summary.all_time:
        lines.append("")
        lines.append("**Most visited sites (all time):**")
        for index, entry in enumerate(summary.all_time, start=1):
            lines.append(f"{index}. {entry.title or 'Untitled'} ({entry.visit_count:,} visits)")
            lines.append(f"   URL: {entry.url}")

    return "\n".join(lines)


def tool_registrations(provider: BrowserDataProvider) -> list[ToolRegistration]:
    tool = BrowsingPatternsTool(provider)
    return [
        ToolRegistration(
            name=BrowsingPatternsTool.name,
            description=DESCRIPTION,
            input_model=BrowsingPatternsInput,
            output_model=TextOutput,
            handler=cast(Callable[[ToolRequest], ToolResponse], tool.execute),
            error_prefix="Error analyzing browsing patterns",
            error_hints=HISTORY_ERROR_HINTS,
        )
    ]


__all__ = [
    "BrowsingPatternsInput",
    "BrowsingPatternsTool",
    "PatternSummary",
    "format_patterns",
    "summarize_visits",
    "tool_registrations",
]
