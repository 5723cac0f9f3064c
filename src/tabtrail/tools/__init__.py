"""Tool registry and aggregation.

Each tool module exports ``tool_registrations`` which yields one or more
``ToolRegistration`` instances bound to the provided data provider.
``get_tool_registrations`` aggregates them, in advertised order, for the router.
"""

from __future__ import annotations

from collections.abc import Iterable

from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.tools.bookmarks import tool_registrations as bookmark_registrations
from tabtrail.tools.browsing_patterns import tool_registrations as pattern_registrations
from tabtrail.tools.export_data import tool_registrations as export_registrations
from tabtrail.tools.history_stats import tool_registrations as stats_registrations
from tabtrail.tools.recent_browsing import tool_registrations as recent_registrations
from tabtrail.tools.registry import ToolRegistration
from tabtrail.tools.search_history import tool_registrations as search_registrations


def get_tool_registrations(provider: BrowserDataProvider) -> list[ToolRegistration]:
    registrations: list[ToolRegistration] = []

    def extend(items: Iterable[ToolRegistration]) -> None:
        registrations.extend(items)

    extend(search_registrations(provider))
    extend(bookmark_registrations(provider))
    extend(pattern_registrations(provider))
    extend(export_registrations(provider))
    extend(recent_registrations(provider))
    extend(stats_registrations(provider))

    names = [reg.name for reg in registrations]
    if len(set(names)) != len(names):
        raise RuntimeError(f"duplicate tool names registered: {names}")
    return registrations


__all__ = ["get_tool_registrations", "ToolRegistration", "BrowserDataProvider"]
