"""Records returned by the browser data layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One row of the ``urls`` table."""

    url: str
    title: str | None
    visit_count: int
    last_visit: datetime | None


@dataclass(frozen=True, slots=True)
class RecentVisit:
    """A single visit joined to its URL; ``visit_time`` is the visit's own time."""

    url: str
    title: str
    visit_time: datetime | None
    visit_count: int
    domain: str | None = None


@dataclass(frozen=True, slots=True)
class VisitRecord:
    url: str
    title: str | None
    visit_count: int
    visit_time: datetime | None
    transition: int | None = None


@dataclass(frozen=True, slots=True)
class HistoryStats:
    total_urls: int
    total_visits: int
    earliest_visit: datetime | None = None
    latest_visit: datetime | None = None


@dataclass(frozen=True, slots=True)
class Bookmark:
    """A flattened bookmark with the slash-joined folder path it lives in."""

    title: str
    url: str
    date_added: datetime | None
    folder: str


@dataclass(frozen=True, slots=True)
class ProfileInfo:
    profile_path: Path
    history_path: Path
    bookmarks_path: Path
    history_exists: bool
    bookmarks_exists: bool
    platform: str


__all__ = [
    "Bookmark",
    "HistoryEntry",
    "HistoryStats",
    "ProfileInfo",
    "RecentVisit",
    "VisitRecord",
]
