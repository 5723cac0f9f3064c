"""MCP server over stdio, built on the ``mcp`` low-level ``Server``.

The SDK owns framing, the ``initialize`` handshake, ``ping`` and envelope
errors. This module wires ``tools/list`` and ``tools/call`` to the tool
router. stdout carries protocol messages only; diagnostics go through
``logging``, which the CLI points at stderr.
"""

from __future__ import annotations

import logging

from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import CallToolRequest, ServerResult, Tool

from tabtrail import __version__
from tabtrail.protocol.types import internal_error
from tabtrail.tools.router import ToolRouter

SERVER_NAME = "browser-history-bookmarks-server"

logger = logging.getLogger("tabtrail.protocol.server")


def build_server(router: ToolRouter, *, name: str = SERVER_NAME, version: str = __version__) -> Server:
    """Return an MCP ``Server`` exposing the router's tools."""

    server: Server = Server(name, version=version)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return router.list_tools()

    # direct registration keeps McpError a JSON-RPC error
    async def call_tool(request: CallToolRequest) -> ServerResult:
        params = request.params
        try:
            result = router.call_tool(params.name, params.arguments)
        except McpError:
            raise
        except Exception as exc:
            logger.error("internal error calling %s: %s", params.name, exc, exc_info=True)
            raise internal_error(exc) from exc
        return ServerResult(result)

    server.request_handlers[CallToolRequest] = call_tool
    return server


async def serve_stdio(router: ToolRouter) -> None:
    """Serve ``router`` on stdin/stdout until the client disconnects."""

    server = build_server(router)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("%s %s running on stdio", server.name, server.version)
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("stdin closed, shutting down")


__all__ = ["SERVER_NAME", "build_server", "serve_stdio"]
