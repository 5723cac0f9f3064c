"""Chrome profile discovery.

``ProfileLocator`` scans a list of candidate directories once and caches the
first one that holds a ``History`` database or a ``Bookmarks`` file. The cache
is idempotent: two racing first calls scan twice and store the same answer.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from tabtrail.browser.errors import ProfileNotFoundError
from tabtrail.config import Settings

HISTORY_FILENAME = "History"
BOOKMARKS_FILENAME = "Bookmarks"

_PROFILE_SUFFIXES: dict[str, tuple[str, ...]] = {
    "darwin": (
        "Library/Application Support/Google/Chrome/Default",
        "Library/Application Support/Google/Chrome/Profile 1",
        "Library/Application Support/Chromium/Default",
    ),
    "win32": (
        "AppData/Local/Google/Chrome/User Data/Default",
        "AppData/Local/Google/Chrome/User Data/Profile 1",
        "AppData/Local/Chromium/User Data/Default",
    ),
    "linux": (
        ".config/google-chrome/Default",
        ".config/google-chrome/Profile 1",
        ".config/chromium/Default",
        "snap/chromium/common/chromium/Default",
    ),
}

logger = logging.getLogger("tabtrail.browser.profile")


@dataclass(frozen=True, slots=True)
class ProfilePaths:
    """Resolved locations inside a Chrome profile directory."""

    root: Path

    @property
    def history(self) -> Path:
        return self.root / HISTORY_FILENAME

    @property
    def bookmarks(self) -> Path:
        return self.root / BOOKMARKS_FILENAME


def default_candidates(platform: str | None = None, home: Path | None = None) -> list[Path]:
    """Return the well-known profile directories for ``platform``."""

    key = platform or sys.platform
    if key.startswith("linux"):
        key = "linux"
    base = home or Path.home()
    return [base / suffix for suffix in _PROFILE_SUFFIXES.get(key, ())]


class ProfileLocator:
    """Locate and cache the Chrome profile directory."""

    def __init__(
        self,
        candidates: Sequence[Path] | None = None,
        *,
        profile_dir: Path | None = None,
        extra_dirs: Iterable[Path] = (),
    ) -> None:
        if profile_dir is not None:
            base = [profile_dir]
        elif candidates is not None:
            base = list(candidates)
        else:
            base = default_candidates()
        self.candidates: tuple[Path, ...] = (*extra_dirs, *base)
        self._cached: ProfilePaths | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ProfileLocator:
        return cls(profile_dir=settings.profile_dir, extra_dirs=settings.extra_profile_dirs)

    def locate(self) -> ProfilePaths:
        """Return the cached profile, scanning candidates on first use."""

        cached = self._cached
        if cached is not None:
            return cached
        found = self._scan()
        self._cached = found
        logger.info("using Chrome profile at %s", found.root)
        return found

    def reset(self) -> None:
        """Forget the cached profile so the next call rescans."""

        self._cached = None

    def _scan(self) -> ProfilePaths:
        for directory in self.candidates:
            if not directory.is_dir():
                continue
            paths = ProfilePaths(directory)
            if paths.history.exists() or paths.bookmarks.exists():
                return paths
            logger.debug("skipping %s: no History or Bookmarks file", directory)

        searched = ", ".join(str(path) for path in self.candidates) or "<none>"
        raise ProfileNotFoundError(
            f"Chrome installation not found. Searched paths: {searched}\n"
            "Please ensure Chrome is installed and has been run at least once."
        )


__all__ = [
    "BOOKMARKS_FILENAME",
    "HISTORY_FILENAME",
    "ProfileLocator",
    "ProfilePaths",
    "default_candidates",
]
