"""Tool router exposing descriptors and dispatch for MCP clients.

All tool parameters are defined via Pydantic models in per-tool modules.
Descriptors advertised to clients are generated from those models, and the
same models validate incoming arguments before a handler runs.

Unknown tool names raise ``ToolNotFoundError``. Everything that goes wrong
inside a known tool (bad arguments, missing profile, locked database) is
recovered here and returned as an ``isError`` ``CallToolResult``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from tabtrail.browser.provider import BrowserDataProvider
from tabtrail.protocol.types import CallToolResult, Tool, ToolNotFoundError, result_text, text_result
from tabtrail.tools import get_tool_registrations
from tabtrail.tools.base import TextOutput, ToolInputError
from tabtrail.tools.registry import ToolRegistration

_DROPPED_SCHEMA_KEYS = ("title",)


def _schema_for_model(model: type[BaseModel]) -> dict[str, Any]:
    """Return a flat JSON schema for ``model`` without pydantic noise."""

    schema = _inline_schema(model.model_json_schema())
    properties = {name: _simplify_property(prop) for name, prop in (schema.get("properties") or {}).items()}
    result: dict[str, Any] = {"type": "object", "properties": properties}
    required = schema.get("required")
    if required:
        result["required"] = list(required)
    return result


def _inline_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Unwrap a top-level ``allOf``/``$ref`` indirection if present."""

    defs = schema.get("$defs")
    all_of = schema.get("allOf")
    if not defs or not isinstance(all_of, list) or len(all_of) != 1:
        return schema
    ref = all_of[0].get("$ref", "")
    name = ref.rsplit("/", 1)[-1]
    return defs.get(name, schema)


def _simplify_property(prop: Mapping[str, Any]) -> dict[str, Any]:
    simplified = {key: value for key, value in prop.items() if key not in _DROPPED_SCHEMA_KEYS}
    variants = simplified.pop("anyOf", None)
    if isinstance(variants, list):
        concrete = [variant for variant in variants if variant.get("type") != "null"]
        if len(concrete) == 1:
            simplified = {**concrete[0], **simplified}
        else:
            simplified["anyOf"] = variants
    if "default" in simplified and simplified["default"] is None:
        del simplified["default"]
    return simplified


def tool_descriptors(provider: BrowserDataProvider | None = None) -> list[Tool]:
    """Return the advertised descriptors; never touches the filesystem."""

    regs = get_tool_registrations(provider or BrowserDataProvider())
    return [_descriptor(reg) for reg in regs]


def _descriptor(reg: ToolRegistration) -> Tool:
    return Tool(name=reg.name, description=reg.description, inputSchema=_schema_for_model(reg.input_model))


class ToolRouter:
    """Validate, dispatch and normalize tool calls."""

    def __init__(self, provider: BrowserDataProvider, logger: logging.Logger | None = None) -> None:
        self.provider = provider
        self.logger = logger or logging.getLogger("tabtrail.tools.router")
        self._registrations = tuple(get_tool_registrations(provider))
        self._by_name = {reg.name: reg for reg in self._registrations}
        self._descriptors = tuple(_descriptor(reg) for reg in self._registrations)

    def list_tools(self) -> list[Tool]:
        return list(self._descriptors)

    def tool_names(self) -> list[str]:
        return [reg.name for reg in self._registrations]

    def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> CallToolResult:
        reg = self._by_name.get(name)
        if reg is None:
            self.logger.warning("unknown tool requested: %s", name)
            raise ToolNotFoundError(name)

        # null and omitted keys both take the default
        args = {key: value for key, value in (arguments or {}).items() if value is not None}
        self._log_request(name, args)

        try:
            validated = reg.input_model.model_validate(args)
        except ValidationError as exc:
            result = text_result(_format_validation_error(name, exc), is_error=True)
            self._log_response(name, result)
            return result

        try:
            output = reg.handler(validated)
        except ToolInputError as exc:
            result = text_result(f"Error: {exc}", is_error=True)
        except Exception as exc:
            self.logger.error("tool %s failed: %s", name, exc, exc_info=True)
            result = text_result(_format_failure(reg, exc), is_error=True)
        else:
            result = text_result(_output_text(output))

        self._log_response(name, result)
        return result

    def _log_request(self, name: str, kwargs: dict[str, Any]) -> None:
        self.logger.info("tool request: %s args=%s", name, self._stringify(kwargs))

    def _log_response(self, name: str, result: CallToolResult) -> None:
        self.logger.debug(
            "tool response: %s error=%s result=%s", name, result.isError, self._stringify(result_text(result))
        )

    @staticmethod
    def _stringify(obj: Any) -> str:
        try:
            text = json.dumps(obj, default=str)
        except (TypeError, ValueError):
            text = repr(obj)

        if len(text) > 2000:
            return f"{text[:2000]}... [truncated]"
        return text


def _output_text(output: BaseModel) -> str:
    if isinstance(output, TextOutput):
        return output.text
    return output.model_dump_json(indent=2)


def _format_validation_error(name: str, exc: ValidationError) -> str:
    lines = [f"Error: Invalid arguments for {name}:"]
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        lines.append(f"- {location}: {error.get('msg', 'invalid value')}")
    return "\n".join(lines)


def _format_failure(reg: ToolRegistration, exc: Exception) -> str:
    text = f"{reg.error_prefix}: {exc}"
    if reg.error_hints:
        causes = "\n".join(f"- {hint}" for hint in reg.error_hints)
        text += f"\n\nThis might occur if:\n{causes}"
    return text


__all__ = ["tool_descriptors", "ToolRouter", "ToolNotFoundError"]
