"""Read-only queries against Chrome's ``History`` SQLite database.

Every query opens its own ``mode=ro`` connection and closes it before
returning, on success and on error alike.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence
from contextlib import closing
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from urllib.parse import quote

from tabtrail.browser.domains import extract_domain
from tabtrail.browser.errors import HistoryLockedError, HistoryQueryError, HistoryUnavailableError
from tabtrail.browser.timestamps import chrome_time_to_datetime, datetime_to_chrome_time, parse_date_bound
from tabtrail.browser.types import HistoryEntry, HistoryStats, RecentVisit, VisitRecord

logger = logging.getLogger("tabtrail.browser.history")

SEARCH_SQL = """
    SELECT urls.url, urls.title, urls.visit_count, urls.last_visit_time
    FROM urls
    WHERE 1=1
"""

RECENT_SQL = """
    SELECT urls.url, urls.title, urls.visit_count, visits.visit_time
    FROM visits
    INNER JOIN urls ON urls.id = visits.url
    WHERE visits.visit_time >= ?
    ORDER BY visits.visit_time DESC
    LIMIT ?
"""

VISITS_BETWEEN_SQL = """
    SELECT urls.url, urls.title, urls.visit_count, visits.visit_time, visits.transition
    FROM visits
    INNER JOIN urls ON visits.url = urls.id
    WHERE visits.visit_time >= ? AND visits.visit_time <= ?
    ORDER BY visits.visit_time DESC
"""

STATS_SQL = """
    SELECT
        COUNT(*) AS total_urls,
        COALESCE(SUM(visit_count), 0) AS total_visits,
        MIN(last_visit_time) AS earliest_visit,
        MAX(last_visit_time) AS latest_visit
    FROM urls
    WHERE visit_count > 0
"""

RECENT_URLS_SQL = """
    SELECT url, title, visit_count, last_visit_time
    FROM urls
    WHERE visit_count > 0
    ORDER BY last_visit_time DESC
    LIMIT ?
"""

MOST_VISITED_SQL = """
    SELECT url, title, visit_count, last_visit_time
    FROM urls
    WHERE visit_count > 0
    ORDER BY visit_count DESC
    LIMIT ?
"""


class HistoryStore:
    """Query helper bound to one History database file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        """Run ``sql`` read-only and return all rows."""

        if not self.db_path.exists():
            raise HistoryUnavailableError(f"History database not found at {self.db_path}")

        uri = f"file:{quote(str(self.db_path))}?mode=ro"
        try:
            with closing(sqlite3.connect(uri, uri=True)) as conn:
                conn.row_factory = sqlite3.Row
                return conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.OperationalError as exc:
            if "locked" in str(exc).lower():
                raise HistoryLockedError(f"History database is locked: {exc}") from exc
            raise HistoryQueryError(f"Database query failed: {exc}") from exc
        except sqlite3.DatabaseError as exc:
            raise HistoryQueryError(f"Failed to open Chrome History database: {exc}") from exc

    def search(
        self,
        text: str | None,
        *,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = 50,
    ) -> list[HistoryEntry]:
        """Substring search over URL and title with an inclusive date filter."""

        sql = SEARCH_SQL
        params: list[Any] = []

        if text and text.strip():
            pattern = f"%{_escape_like(text)}%"
            sql += " AND (urls.url LIKE ? ESCAPE '\\' OR urls.title LIKE ? ESCAPE '\\')"
            params.extend([pattern, pattern])

        if start_date:
            sql += " AND urls.last_visit_time >= ?"
            params.append(parse_date_bound(start_date))

        if end_date:
            sql += " AND urls.last_visit_time <= ?"
            params.append(parse_date_bound(end_date, end_of_day=True))

        sql += " ORDER BY urls.last_visit_time DESC LIMIT ?"
        params.append(limit)

        rows = self.query(sql, params)
        logger.debug("search matched %d rows", len(rows))
        return [_history_entry(row) for row in rows]

    def recent_visits(
        self,
        hours: float,
        limit: int,
        *,
        include_details: bool = True,
        now: datetime | None = None,
    ) -> list[RecentVisit]:
        """Visits at or after ``now - hours``, newest first."""

        instant = now or datetime.now(UTC)
        bound = datetime_to_chrome_time(instant - timedelta(hours=hours))
        rows = self.query(RECENT_SQL, (bound, limit))

        visits: list[RecentVisit] = []
        for row in rows:
            visits.append(
                RecentVisit(
                    url=row["url"],
                    title=row["title"] or "Untitled",
                    visit_time=chrome_time_to_datetime(row["visit_time"]),
                    visit_count=int(row["visit_count"] or 0),
                    domain=extract_domain(row["url"]) if include_details else None,
                )
            )
        return visits

    def visits_between(self, start: datetime, end: datetime | None = None) -> list[VisitRecord]:
        """Every individual visit in ``[start, end]``, newest first."""

        upper = end or datetime.now(UTC)
        rows = self.query(VISITS_BETWEEN_SQL, (datetime_to_chrome_time(start), datetime_to_chrome_time(upper)))
        return [
            VisitRecord(
                url=row["url"],
                title=row["title"],
                visit_count=int(row["visit_count"] or 0),
                visit_time=chrome_time_to_datetime(row["visit_time"]),
                transition=row["transition"],
            )
            for row in rows
        ]

    def stats(self) -> HistoryStats:
        rows = self.query(STATS_SQL)
        if not rows:
            return HistoryStats(total_urls=0, total_visits=0)
        row = rows[0]
        return HistoryStats(
            total_urls=int(row["total_urls"] or 0),
            total_visits=int(row["total_visits"] or 0),
            earliest_visit=chrome_time_to_datetime(row["earliest_visit"]),
            latest_visit=chrome_time_to_datetime(row["latest_visit"]),
        )

    def recent_urls(self, limit: int) -> list[HistoryEntry]:
        return [_history_entry(row) for row in self.query(RECENT_URLS_SQL, (limit,))]

    def most_visited(self, limit: int = 20) -> list[HistoryEntry]:
        """URLs with the highest all-time visit counts."""

        return [_history_entry(row) for row in self.query(MOST_VISITED_SQL, (limit,))]


def _history_entry(row: sqlite3.Row) -> HistoryEntry:
    return HistoryEntry(
        url=row["url"],
        title=row["title"] or None,
        visit_count=int(row["visit_count"] or 0),
        last_visit=chrome_time_to_datetime(row["last_visit_time"]),
    )


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


__all__ = ["HistoryStore"]
