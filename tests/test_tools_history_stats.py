from conftest import FakeProfile, utc

from tabtrail.browser.types import HistoryStats
from tabtrail.protocol.types import result_text
from tabtrail.tools.history_stats import format_history_stats
from tabtrail.tools.router import ToolRouter


def test_format_uses_thousands_separators() -> None:
    stats = HistoryStats(
        total_urls=1234,
        total_visits=98765,
        earliest_visit=utc(2020, 1, 2, 3, 4, 5),
        latest_visit=utc(2024, 6, 1, 12),
    )

    text = format_history_stats(stats)

    assert "- Total unique URLs: 1,234" in text
    assert "- Total visits: 98,765" in text
    assert "- Earliest visit: 2020-01-02 03:04:05" in text
    assert "- Latest visit: 2024-06-01 12:00:00" in text
    assert text.startswith("Chrome History Database Statistics:")


def test_empty_database(router: ToolRouter) -> None:
    result = router.call_tool("get_history_stats", {})

    assert result.isError is False
    assert "- Total unique URLs: 0" in result_text(result)
    assert "- Total visits: 0" in result_text(result)
    assert "- Earliest visit: n/a" in result_text(result)
    assert "- Latest visit: n/a" in result_text(result)


def test_end_to_end_stats(fake_profile: FakeProfile, router: ToolRouter) -> None:
    fake_profile.add_url("https://a.example/", "A", [utc(2023, 1, 1), utc(2023, 2, 1)])
    fake_profile.add_url("https://b.example/", "B", [utc(2024, 4, 1)])

    text = result_text(router.call_tool("get_history_stats"))

    assert "- Total unique URLs: 2" in text
    assert "- Total visits: 3" in text
    assert "- Earliest visit: 2023-02-01 00:00:00" in text
    assert "- Latest visit: 2024-04-01 00:00:00" in text
