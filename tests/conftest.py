import json
import pathlib
import shutil
import sqlite3
import sys
from contextlib import closing
from datetime import UTC, datetime
from typing import Any

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

# Ensure src/ is importable when running tests without installing the package.
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from tabtrail.browser.profile import ProfileLocator  # noqa: E402
from tabtrail.browser.provider import BrowserDataProvider  # noqa: E402
from tabtrail.browser.timestamps import datetime_to_chrome_time  # noqa: E402
from tabtrail.tools.router import ToolRouter  # noqa: E402

HISTORY_SCHEMA = """
CREATE TABLE urls (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url LONGVARCHAR,
    title LONGVARCHAR,
    visit_count INTEGER DEFAULT 0 NOT NULL,
    typed_count INTEGER DEFAULT 0 NOT NULL,
    last_visit_time INTEGER NOT NULL,
    hidden INTEGER DEFAULT 0 NOT NULL
);
CREATE TABLE visits (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url INTEGER NOT NULL,
    visit_time INTEGER NOT NULL,
    from_visit INTEGER,
    transition INTEGER DEFAULT 0 NOT NULL
);
"""


class FakeProfile:
    """A temporary Chrome profile with a History database and optional Bookmarks."""

    def __init__(self, root: pathlib.Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.history_path = root / "History"
        self.bookmarks_path = root / "Bookmarks"
        with closing(sqlite3.connect(self.history_path)) as conn:
            conn.executescript(HISTORY_SCHEMA)
            conn.commit()

    def add_url(
        self,
        url: str,
        title: str | None,
        visits: list[datetime],
        *,
        visit_count: int | None = None,
        transition: int = 0,
    ) -> int:
        last_visit = max(visits) if visits else None
        with closing(sqlite3.connect(self.history_path)) as conn:
            cursor = conn.execute(
                "INSERT INTO urls (url, title, visit_count, last_visit_time) VALUES (?, ?, ?, ?)",
                (
                    url,
                    title,
                    len(visits) if visit_count is None else visit_count,
                    datetime_to_chrome_time(last_visit) if last_visit else 0,
                ),
            )
            url_id = cursor.lastrowid
            conn.executemany(
                "INSERT INTO visits (url, visit_time, transition) VALUES (?, ?, ?)",
                [(url_id, datetime_to_chrome_time(moment), transition) for moment in visits],
            )
            conn.commit()
        return int(url_id)

    def write_bookmarks(self, data: Any) -> None:
        text = data if isinstance(data, str) else json.dumps(data)
        self.bookmarks_path.write_text(text, encoding="utf-8")


def bookmark_url(name: str, url: str, date_added: str = "13300000000000000") -> dict[str, Any]:
    return {"type": "url", "name": name, "url": url, "date_added": date_added}


def bookmark_folder(name: str, children: list[dict[str, Any]]) -> dict[str, Any]:
    return {"type": "folder", "name": name, "children": children}


def utc(*parts: int) -> datetime:
    return datetime(*parts, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _isolate_tabtrail_home(monkeypatch: pytest.MonkeyPatch):
    """Point TABTRAIL_HOME at a repo-local sandbox so we never touch the real FS."""

    home = PROJECT_ROOT / ".work"
    if home.exists():
        shutil.rmtree(home, ignore_errors=True)
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("TABTRAIL_HOME", str(home))
    monkeypatch.delenv("TABTRAIL_PROFILE_DIR", raising=False)
    monkeypatch.delenv("TABTRAIL_LOG_LEVEL", raising=False)
    yield


@pytest.fixture
def fake_profile(tmp_path: pathlib.Path) -> FakeProfile:
    return FakeProfile(tmp_path / "Default")


@pytest.fixture
def provider(fake_profile: FakeProfile) -> BrowserDataProvider:
    return BrowserDataProvider(ProfileLocator([fake_profile.root]))


@pytest.fixture
def router(provider: BrowserDataProvider) -> ToolRouter:
    return ToolRouter(provider)


@pytest.fixture
def missing_provider(tmp_path: pathlib.Path) -> BrowserDataProvider:
    """Provider whose only candidate directory does not exist."""

    return BrowserDataProvider(ProfileLocator([tmp_path / "nowhere"]))
