"""MCP result helpers and request-level errors built on ``mcp.types``."""

from __future__ import annotations

from typing import Any

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, METHOD_NOT_FOUND, CallToolResult, ErrorData, TextContent, Tool
from pydantic import BaseModel


class ToolNotFoundError(McpError):
    """Unknown tool name; reported as a JSON-RPC error, never as a tool result."""

    def __init__(self, name: str) -> None:
        super().__init__(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))
        self.name = name


def internal_error(exc: Exception) -> McpError:
    return McpError(ErrorData(code=INTERNAL_ERROR, message=f"Internal error: {exc}"))


def text_result(text: str, *, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def result_text(result: CallToolResult) -> str:
    """Join the text blocks of ``result``."""

    return "\n".join(block.text for block in result.content if isinstance(block, TextContent))


def to_wire(model: BaseModel) -> dict[str, Any]:
    """Serialize an MCP model the way it appears on the wire."""

    return model.model_dump(by_alias=True, mode="json", exclude_none=True)


__all__ = [
    "CallToolResult",
    "TextContent",
    "Tool",
    "ToolNotFoundError",
    "internal_error",
    "result_text",
    "text_result",
    "to_wire",
]
