"""Shared tool registration structures.

Tools declare their own Pydantic input/output models and expose registrations
via ``tool_registrations`` in each module. ``ToolRouter`` consumes these to
build descriptors and handlers.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from tabtrail.tools.base import ToolRequest, ToolResponse

HISTORY_ERROR_HINTS: tuple[str, ...] = (
    "Chrome is not installed",
    "Chrome profile cannot be accessed",
    "History database is locked (Chrome is running)",
)

BOOKMARK_ERROR_HINTS: tuple[str, ...] = (
    "Chrome is not installed",
    "Chrome profile cannot be accessed",
    "Bookmarks file is missing (Chrome has not been run yet)",
    "Bookmarks file is corrupted",
)


@dataclass(frozen=True)
class ToolRegistration:
    name: str
    description: str
    input_model: type[ToolRequest]
    output_model: type[ToolResponse]
    handler: Callable[[ToolRequest], ToolResponse]
    error_prefix: str = "Error"
    error_hints: tuple[str, ...] = ()


__all__ = ["ToolRegistration", "HISTORY_ERROR_HINTS", "BOOKMARK_ERROR_HINTS"]
