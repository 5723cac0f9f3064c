import logging

import pytest
from conftest import FakeProfile, bookmark_url, utc
from mcp.types import METHOD_NOT_FOUND

from tabtrail.protocol.types import CallToolResult, ToolNotFoundError, result_text, to_wire
from tabtrail.tools.router import ToolRouter, tool_descriptors

TOOL_ORDER = [
    "search_history",
    "get_bookmarks",
    "analyze_browsing_patterns",
    "export_data",
    "get_recent_browsing",
    "get_history_stats",
]

MINIMAL_ARGS = {
    "search_history": {"query": "example"},
    "get_bookmarks": {},
    "analyze_browsing_patterns": {},
    "export_data": {},
    "get_recent_browsing": {},
    "get_history_stats": {},
}


def test_tools_are_listed_in_fixed_order(router: ToolRouter) -> None:
    assert [descriptor.name for descriptor in router.list_tools()] == TOOL_ORDER
    assert router.tool_names() == TOOL_ORDER


def test_listing_never_needs_a_profile(missing_provider) -> None:
    router = ToolRouter(missing_provider)

    descriptors = router.list_tools()

    assert len(descriptors) == 6
    assert all(descriptor.description for descriptor in descriptors)


def test_tool_descriptors_without_provider() -> None:
    assert [descriptor.name for descriptor in tool_descriptors()] == TOOL_ORDER


@pytest.mark.parametrize("name", TOOL_ORDER)
def test_every_tool_returns_a_single_text_block(fake_profile: FakeProfile, router: ToolRouter, name: str) -> None:
    fake_profile.add_url("https://example.com/", "Example", [utc(2024, 1, 1)])
    fake_profile.write_bookmarks({"roots": {"bookmark_bar": {"children": [bookmark_url("A", "https://a/")]}}})

    result = router.call_tool(name, MINIMAL_ARGS[name])

    assert isinstance(result, CallToolResult)
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert result.isError is False


@pytest.mark.parametrize("name", TOOL_ORDER)
def test_every_tool_reports_missing_chrome_as_result(missing_provider, name: str) -> None:
    router = ToolRouter(missing_provider)

    result = router.call_tool(name, MINIMAL_ARGS[name])

    assert result.isError is True
    assert "Chrome installation not found" in result_text(result)
    assert "This might occur if:" in result_text(result)


def test_unknown_tool_raises(router: ToolRouter, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="tabtrail.tools.router"):
        with pytest.raises(ToolNotFoundError) as excinfo:
            router.call_tool("delete_history", {})

    assert excinfo.value.error.code == METHOD_NOT_FOUND
    assert str(excinfo.value) == "Unknown tool: delete_history"
    assert "unknown tool requested: delete_history" in caplog.text


def test_blank_search_does_not_touch_the_database(missing_provider) -> None:
    router = ToolRouter(missing_provider)

    result = router.call_tool("search_history", {"query": "   "})

    assert result.isError is True
    assert result_text(result) == "Error: Please provide either a search query or a date range (or both)"


@pytest.mark.parametrize(
    ("name", "arguments", "field"),
    [
        ("get_recent_browsing", {"hours": 200}, "hours"),
        ("get_recent_browsing", {"hours": 0}, "hours"),
        ("get_recent_browsing", {"limit": 501}, "limit"),
        ("search_history", {"query": "x", "limit": 0}, "limit"),
        ("analyze_browsing_patterns", {"timeframe": "decade"}, "timeframe"),
        ("export_data", {"format": "xml"}, "format"),
    ],
)
def test_invalid_arguments_become_error_results(router: ToolRouter, name: str, arguments: dict, field: str) -> None:
    result = router.call_tool(name, arguments)

    assert result.isError is True
    assert result_text(result).startswith(f"Error: Invalid arguments for {name}:")
    assert f"- {field}:" in result_text(result)


def test_null_arguments_mean_default(fake_profile: FakeProfile, router: ToolRouter) -> None:
    result = router.call_tool("get_recent_browsing", {"hours": None, "limit": None})

    assert result.isError is False
    assert result_text(result).startswith("Recent browsing activity (last 24 hours):")


def test_missing_arguments_object_is_accepted(router: ToolRouter) -> None:
    result = router.call_tool("get_history_stats", None)

    assert result.isError is False


def test_provider_failure_lists_likely_causes(fake_profile: FakeProfile, router: ToolRouter, caplog) -> None:
    fake_profile.history_path.unlink()
    fake_profile.write_bookmarks({"roots": {}})

    with caplog.at_level(logging.ERROR, logger="tabtrail.tools.router"):
        result = router.call_tool("get_history_stats", {})

    assert result.isError is True
    assert result_text(result).startswith("Error getting history statistics: History database not found")
    assert "- History database is locked (Chrome is running)" in result_text(result)
    assert "tool get_history_stats failed" in caplog.text


def test_requests_are_logged(router: ToolRouter, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="tabtrail.tools.router"):
        router.call_tool("get_history_stats", {})

    assert "tool request: get_history_stats args={}" in caplog.text
    assert "tool response: get_history_stats error=False" in caplog.text


def test_stringify_truncates_long_payloads() -> None:
    text = ToolRouter._stringify({"query": "x" * 5000})

    assert text.endswith("... [truncated]")
    assert len(text) < 2100


def test_wire_shape_of_results(router: ToolRouter) -> None:
    wire = to_wire(router.call_tool("search_history", {}))

    assert wire == {
        "content": [{"type": "text", "text": "Error: Please provide either a search query or a date range (or both)"}],
        "isError": True,
    }
