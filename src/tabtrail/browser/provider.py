"""Read-only facade over a Chrome profile's history and bookmarks.

Tools talk to ``BrowserDataProvider`` only. The provider owns a
``ProfileLocator`` passed in by the caller, so profile discovery happens
lazily on first data access and is reused afterwards.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

from tabtrail.browser.bookmarks import BookmarkTree, flatten_tree, read_bookmark_tree
from tabtrail.browser.history import HistoryStore
from tabtrail.browser.profile import ProfileLocator, ProfilePaths
from tabtrail.browser.types import Bookmark, HistoryEntry, HistoryStats, ProfileInfo, RecentVisit, VisitRecord


class BrowserDataProvider:
    """Data access used by the tool handlers."""

    def __init__(self, locator: ProfileLocator | None = None) -> None:
        self.locator = locator or ProfileLocator()

    def locate_profile(self) -> Path:
        return self.locator.locate().root

    def search_history(
        self,
        query: str | None,
        *,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = 50,
    ) -> list[HistoryEntry]:
        return self._history().search(query, start_date=start_date, end_date=end_date, limit=limit)

    def recent_browsing(
        self,
        hours: float,
        limit: int,
        include_details: bool = True,
        *,
        now: datetime | None = None,
    ) -> list[RecentVisit]:
        return self._history().recent_visits(hours, limit, include_details=include_details, now=now)

    def history_stats(self) -> HistoryStats:
        return self._history().stats()

    def visits_between(self, start: datetime, end: datetime | None = None) -> list[VisitRecord]:
        return self._history().visits_between(start, end)

    def recent_history(self, limit: int) -> list[HistoryEntry]:
        return self._history().recent_urls(limit)

    def most_visited(self, limit: int = 20) -> list[HistoryEntry]:
        return self._history().most_visited(limit)

    def read_bookmark_tree(self) -> BookmarkTree:
        return read_bookmark_tree(self._profile().bookmarks)

    def get_bookmarks(self, folder: str | None = None) -> list[Bookmark]:
        return flatten_tree(self.read_bookmark_tree(), folder)

    def profile_info(self) -> ProfileInfo:
        paths = self._profile()
        return ProfileInfo(
            profile_path=paths.root,
            history_path=paths.history,
            bookmarks_path=paths.bookmarks,
            history_exists=paths.history.exists(),
            bookmarks_exists=paths.bookmarks.exists(),
            platform=sys.platform,
        )

    def _profile(self) -> ProfilePaths:
        return self.locator.locate()

    def _history(self) -> HistoryStore:
        return HistoryStore(self._profile().history)


__all__ = ["BrowserDataProvider"]
