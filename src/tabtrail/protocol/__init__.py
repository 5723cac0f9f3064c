"""MCP protocol helpers. The stdio server lives in ``tabtrail.protocol.server``."""

from __future__ import annotations

from .types import (  # noqa: F401
    ToolNotFoundError,
    internal_error,
    result_text,
    text_result,
    to_wire,
)
