import csv
import io
import json

from conftest import FakeProfile, bookmark_url, utc

from tabtrail.browser.types import Bookmark, HistoryEntry
from tabtrail.protocol.types import result_text
from tabtrail.tools.export_data import CSV_COLUMNS, render_csv, render_html, render_json
from tabtrail.tools.router import ToolRouter

EXPORTED_AT = utc(2024, 6, 1, 12)
HISTORY = [HistoryEntry("https://a.example/?q=1&r=2", "A <b>", 3, utc(2024, 5, 1, 8))]
BOOKMARKS = [Bookmark("Docs", "https://docs.example/", None, "bookmark_bar/Work")]


def test_render_json_only_includes_requested_sections() -> None:
    document = json.loads(render_json(HISTORY, None, EXPORTED_AT))

    assert document == {
        "exported_at": "2024-06-01T12:00:00+00:00",
        "history": [
            {
                "url": "https://a.example/?q=1&r=2",
                "title": "A <b>",
                "visit_count": 3,
                "last_visit": "2024-05-01 08:00:00",
            }
        ],
    }


def test_render_csv_tags_record_types() -> None:
    rows = list(csv.DictReader(io.StringIO(render_csv(HISTORY, BOOKMARKS, EXPORTED_AT))))

    assert tuple(rows[0]) == CSV_COLUMNS
    assert [row["record_type"] for row in rows] == ["history", "bookmark"]
    assert rows[0]["visit_count"] == "3"
    assert rows[1]["folder"] == "bookmark_bar/Work"
    assert rows[1]["date_added"] == ""


def test_render_html_escapes_content() -> None:
    text = render_html(HISTORY, BOOKMARKS, EXPORTED_AT)

    assert "<h2>History</h2>" in text
    assert "<h2>Bookmarks</h2>" in text
    assert "A &lt;b&gt;" in text
    assert '<a href="https://a.example/?q=1&amp;r=2">' in text
    assert text.startswith("<!DOCTYPE html>")
    assert text.endswith("</html>")


def test_export_requires_something_to_export(router: ToolRouter) -> None:
    result = router.call_tool("export_data", {"include_history": False, "include_bookmarks": False})

    assert result.isError is True
    assert result_text(result) == "Error: Nothing to export: enable include_history and/or include_bookmarks"


def test_end_to_end_json_export(fake_profile: FakeProfile, router: ToolRouter) -> None:
    fake_profile.add_url("https://a.example/", "A", [utc(2024, 1, 1)])
    fake_profile.write_bookmarks({"roots": {"other": {"children": [bookmark_url("B", "https://b.example/")]}}})

    result = router.call_tool("export_data", {"format": "json"})

    assert result.isError is False
    summary, body = result_text(result).split("\n\n", 1)
    assert summary.splitlines() == [
        "Exported browser data (JSON format)",
        "- History entries: 1 (most recent, up to 1,000)",
        "- Bookmarks: 1",
    ]
    document = json.loads(body)
    assert [row["url"] for row in document["history"]] == ["https://a.example/"]
    assert document["bookmarks"][0]["folder"] == "other"


def test_end_to_end_history_only_csv(fake_profile: FakeProfile, router: ToolRouter) -> None:
    fake_profile.add_url("https://a.example/", "A", [utc(2024, 1, 1)])

    result = router.call_tool("export_data", {"format": "csv", "include_bookmarks": False})

    assert result.isError is False
    assert "Bookmarks:" not in result_text(result)
    assert "history,A,https://a.example/" in result_text(result)


def test_missing_bookmarks_fail_the_export(fake_profile: FakeProfile, router: ToolRouter) -> None:
    result = router.call_tool("export_data", {})

    assert result.isError is True
    assert result_text(result).startswith("Error exporting data: Chrome Bookmarks file not found.")
