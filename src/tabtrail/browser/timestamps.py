"""Chrome timestamp helpers.

Chrome stores times as microseconds since 1601-01-01 00:00:00 UTC. Date
arguments arrive as ``YYYY-MM-DD`` strings interpreted in local time.
"""

from __future__ import annotations

from datetime import UTC, datetime, time, timedelta

from tabtrail.browser.errors import InvalidDateError

CHROME_EPOCH = datetime(1601, 1, 1, tzinfo=UTC)
DATE_FORMAT = "%Y-%m-%d"
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def chrome_time_to_datetime(value: int | str | None) -> datetime | None:
    """Convert a Chrome timestamp to an aware UTC datetime (None for 0/NULL)."""

    if value is None:
        return None
    micros = int(value)
    if micros <= 0:
        return None
    return CHROME_EPOCH + timedelta(microseconds=micros)


def datetime_to_chrome_time(value: datetime) -> int:
    """Convert a datetime to a Chrome timestamp; naive values are local time."""

    delta = value.astimezone(UTC) - CHROME_EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def parse_date_bound(value: str, *, end_of_day: bool = False) -> int:
    """Parse ``YYYY-MM-DD`` into an inclusive Chrome timestamp bound."""

    try:
        day = datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateError(f"invalid date '{value}', expected YYYY-MM-DD") from exc
    moment = datetime.combine(day, time.max if end_of_day else time.min)
    return datetime_to_chrome_time(moment)


def format_timestamp(value: datetime | None, *, missing: str = "n/a") -> str:
    if value is None:
        return missing
    return value.astimezone(UTC).strftime(DISPLAY_FORMAT)


__all__ = [
    "CHROME_EPOCH",
    "chrome_time_to_datetime",
    "datetime_to_chrome_time",
    "parse_date_bound",
    "format_timestamp",
]
