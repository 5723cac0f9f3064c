"""Local Chrome profile access: history database, bookmarks file, discovery."""

from __future__ import annotations

from .bookmarks import (  # noqa: F401
    BookmarkFolder,
    BookmarkTree,
    BookmarkUrl,
    flatten,
    flatten_tree,
    parse_bookmark_tree,
)
from .errors import (  # noqa: F401
    BookmarksNotFoundError,
    BookmarksParseError,
    BrowserDataError,
    HistoryLockedError,
    HistoryQueryError,
    HistoryUnavailableError,
    InvalidDateError,
    ProfileNotFoundError,
)
from .profile import ProfileLocator, ProfilePaths  # noqa: F401
from .provider import BrowserDataProvider  # noqa: F401
from .types import Bookmark, HistoryEntry, HistoryStats, ProfileInfo, RecentVisit, VisitRecord  # noqa: F401
