"""Errors raised by the browser data layer."""

from __future__ import annotations


class BrowserDataError(Exception):
    """Base class for failures reading local browser data."""


class ProfileNotFoundError(BrowserDataError):
    """No candidate directory holds a History database or Bookmarks file."""


class HistoryUnavailableError(BrowserDataError):
    """The profile has no History database."""


class HistoryLockedError(BrowserDataError):
    """The History database is locked by a running browser."""


class HistoryQueryError(BrowserDataError):
    """The History database could not be opened or queried."""


class BookmarksNotFoundError(BrowserDataError):
    """The profile has no Bookmarks file."""


class BookmarksParseError(BrowserDataError):
    """The Bookmarks file is not valid bookmark JSON."""


class InvalidDateError(BrowserDataError, ValueError):
    """A date argument is not in YYYY-MM-DD form."""


__all__ = [
    "BrowserDataError",
    "ProfileNotFoundError",
    "HistoryUnavailableError",
    "HistoryLockedError",
    "HistoryQueryError",
    "BookmarksNotFoundError",
    "BookmarksParseError",
    "InvalidDateError",
]
