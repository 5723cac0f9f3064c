"""Console entrypoint for tabtrail.

Runs the stdio MCP server by default and offers standalone tool invocations
plus profile and config helpers for checking a setup by hand.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import Any

from tabtrail import __version__
from tabtrail.browser.errors import BrowserDataError
from tabtrail.browser.profile import ProfileLocator
from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.config import LogLevel, Settings, load_settings
from tabtrail.logging import configure_base_logging, configure_file_logging
from tabtrail.paths import default_config_path
from tabtrail.protocol.server import serve_stdio
from tabtrail.protocol.types import ToolNotFoundError, result_text, to_wire
from tabtrail.tools.router import ToolRouter, tool_descriptors


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabtrail",
        description="Browser history and bookmarks MCP server",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (root=INFO, tabtrail=DEBUG) on stderr.",
    )
    parser.add_argument(
        "--log-level",
        choices=[e.value for e in LogLevel],
        dest="log_level",
        help="Log level override",
    )
    parser.add_argument("--profile-dir", dest="profile_dir", help="Chrome profile directory to read")
    parser.add_argument("--no-log-file", action="store_true", dest="no_log_file", help="Log to stderr only")
    parser.add_argument("--config-path", dest="config_path", help="Path to config.toml")

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the MCP server on stdio (default)")
    serve_parser.set_defaults(command="serve")

    subparsers.add_parser("tools", help="Print tool descriptors as JSON")

    tool_parser = subparsers.add_parser("tool", help="Invoke a single tool")
    tool_parser.add_argument("name", choices=[descriptor.name for descriptor in tool_descriptors()], help="Tool name")
    tool_parser.add_argument("--json", dest="json_payload", help="JSON payload with tool arguments")
    tool_parser.add_argument("--arg", action="append", default=[], help="key=value pairs for tool args")

    subparsers.add_parser("profile", help="Show the detected Chrome profile")

    config_parser = subparsers.add_parser("config", help="Config helpers")
    config_sub = config_parser.add_subparsers(dest="config_cmd", required=True)
    config_sub.add_parser("path", help="Print config path")
    config_sub.add_parser("print", help="Print resolved settings")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = _collect_overrides(args)
    settings = load_settings(cli_overrides=overrides, config_path=args.config_path, create_if_missing=True)

    _configure_logging(settings, debug_enabled=args.debug)

    command = args.command or "serve"
    if command == "serve":
        return _run_serve(settings)
    if command == "tools":
        return _run_tools()
    if command == "tool":
        return _run_tool(settings, args)
    if command == "profile":
        return _run_profile(settings)
    if command == "config":
        return _run_config(settings, args)

    parser.error(f"unknown command {command}")
    return 1


def build_router(settings: Settings) -> ToolRouter:
    provider = BrowserDataProvider(ProfileLocator.from_settings(settings))
    return ToolRouter(provider, logger=logging.getLogger("tabtrail.tools.router"))


def _run_serve(settings: Settings) -> int:
    try:
        asyncio.run(serve_stdio(build_router(settings)))
    except KeyboardInterrupt:
        return 130
    return 0


def _run_tools() -> int:
    print(json.dumps([to_wire(descriptor) for descriptor in tool_descriptors()], indent=2))
    return 0


def _run_tool(settings: Settings, args: argparse.Namespace) -> int:
    router = build_router(settings)

    payload: dict[str, Any] = {}
    if args.json_payload:
        try:
            payload = json.loads(args.json_payload)
        except json.JSONDecodeError as exc:
            print(f"error: invalid --json payload: {exc}", file=sys.stderr)
            return 1
        if not isinstance(payload, dict):
            print("error: --json payload must be an object", file=sys.stderr)
            return 1
    for pair in args.arg:
        if "=" not in pair:
            raise SystemExit("--arg expects key=value")
        key, value = pair.split("=", 1)
        payload[key] = value

    try:
        result = router.call_tool(args.name, payload)
    except ToolNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(result_text(result))
    return 1 if result.isError else 0


def _run_profile(settings: Settings) -> int:
    provider = BrowserDataProvider(ProfileLocator.from_settings(settings))
    try:
        info = provider.profile_info()
    except BrowserDataError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(asdict(info), indent=2, default=str))
    return 0


def _run_config(settings: Settings, args: argparse.Namespace) -> int:
    if args.config_cmd == "path":
        print(args.config_path or default_config_path())
        return 0
    if args.config_cmd == "print":
        print(settings.model_dump_json(indent=2))
        return 0
    return 1


def _collect_overrides(args: argparse.Namespace) -> dict[str, Any]:
    log_level_override = args.log_level or (LogLevel.DEBUG.value if args.debug else None)
    return {
        "profile_dir": args.profile_dir,
        "log_level": log_level_override,
        "log_to_file": False if args.no_log_file else None,
    }


def _configure_logging(settings: Settings, *, debug_enabled: bool) -> None:
    configure_base_logging(debug_enabled=debug_enabled, log_level=settings.log_level)
    if settings.log_to_file:
        configure_file_logging(log_level=settings.log_level)


if __name__ == "__main__":
    sys.exit(main())
