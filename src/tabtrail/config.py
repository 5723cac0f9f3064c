"""Configuration models and enums for tabtrail.

Settings resolve from CLI overrides, environment variables, ``config.toml``
and built-in defaults, in that order of precedence.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tabtrail.paths import default_config_path


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Settings(BaseModel):
    """Resolved tabtrail settings."""

    model_config = ConfigDict(frozen=True, validate_default=True, extra="forbid")

    profile_dir: Path | None = None
    extra_profile_dirs: tuple[Path, ...] = Field(default_factory=tuple)
    log_level: LogLevel = LogLevel.INFO
    log_to_file: bool = True

    @field_validator("profile_dir")
    @classmethod
    def _expand_profile_dir(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        return value.expanduser()

    @field_validator("extra_profile_dirs")
    @classmethod
    def _validate_extra_dirs(cls, value: tuple[Path, ...]) -> tuple[Path, ...]:
        expanded = tuple(path.expanduser() for path in value)
        if len(set(expanded)) != len(expanded):
            raise ValueError("extra_profile_dirs entries must be unique")
        return expanded


ENV_PROFILE_DIR = "TABTRAIL_PROFILE_DIR"
ENV_LOG_LEVEL = "TABTRAIL_LOG_LEVEL"


def load_settings(
    cli_overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
    *,
    create_if_missing: bool = False,
) -> Settings:
    env = os.environ if env is None else env
    cli_overrides = cli_overrides or {}
    path = Path(config_path) if config_path else default_config_path()

    created_new = False
    if not path.exists() and create_if_missing:
        write_config(Settings(), path)
        created_new = True

    config_data: dict[str, Any] = {}
    if path.exists() and not created_new:
        config_data = _read_toml(path)

    defaults = Settings()

    profile_dir = _first_value(
        _clean_str(cli_overrides.get("profile_dir")),
        _clean_str(env.get(ENV_PROFILE_DIR)),
        _clean_str(_get_config_value(config_data, "browser", "profile_dir")),
    )

    extra_dirs = _get_config_value(config_data, "browser", "extra_profile_dirs") or []
    if not isinstance(extra_dirs, list):
        raise SystemExit("[browser].extra_profile_dirs must be a list of paths")

    log_level = _first_value(
        _clean_str(cli_overrides.get("log_level")),
        _clean_str(env.get(ENV_LOG_LEVEL)),
        _clean_str(_get_config_value(config_data, "logging", "log_level")),
        defaults.log_level,
    )

    log_to_file = _first_value(
        cli_overrides.get("log_to_file"),
        _get_config_value(config_data, "logging", "log_to_file"),
        defaults.log_to_file,
    )

    log_level_enum = _coerce_enum(log_level, LogLevel, LogLevel.INFO)

    return Settings(
        profile_dir=Path(profile_dir) if profile_dir else None,
        extra_profile_dirs=tuple(Path(str(item)) for item in extra_dirs if str(item).strip()),
        log_level=cast(LogLevel, log_level_enum or LogLevel.INFO),
        log_to_file=bool(log_to_file),
    )


def write_config(settings: Settings, config_path: Path | str | None = None) -> Path:
    path = Path(config_path) if config_path else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    sections: list[str] = []

    browser_section: dict[str, Any] = {
        "profile_dir": str(settings.profile_dir) if settings.profile_dir else None,
        "extra_profile_dirs": [str(p) for p in settings.extra_profile_dirs],
    }
    _append_section(sections, "browser", browser_section)

    logging_section = {"log_level": settings.log_level, "log_to_file": settings.log_to_file}
    _append_section(sections, "logging", logging_section)

    content = "\n\n".join(filter(None, sections)) + "\n"
    path.write_text(content, encoding="utf-8")
    return path


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise SystemExit(f"invalid config file {path}: {exc}") from exc


def _get_config_value(config: Mapping[str, Any], section: str, key: str) -> Any:
    section_data = config.get(section)
    if not isinstance(section_data, dict):
        return None
    return section_data.get(key)


def _clean_str(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    return value


def _first_value(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _coerce_enum(value: Any, enum_cls: type[Enum], default: Enum | None = None) -> Enum | None:
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.lower())
        except ValueError:
            return default
    return default


def _append_section(parts: list[str], name: str, values: Mapping[str, Any]) -> None:
    filtered = {k: v for k, v in values.items() if v is not None and v != [] and v != ()}
    if not filtered:
        return
    lines = [f"[{name}]"]
    for key, val in filtered.items():
        if isinstance(val, bool):
            lines.append(f"{key} = {'true' if val else 'false'}")
        elif isinstance(val, Enum):
            lines.append(f'{key} = "{val.value}"')
        elif isinstance(val, str):
            lines.append(f"{key} = {_quote(val)}")
        elif isinstance(val, list | tuple):
            joined = ", ".join(_quote(str(item)) for item in val)
            lines.append(f"{key} = [{joined}]")
        else:
            lines.append(f"{key} = {val}")
    parts.append("\n".join(lines))


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


__all__ = [
    "Settings",
    "LogLevel",
    "ENV_PROFILE_DIR",
    "ENV_LOG_LEVEL",
    "load_settings",
    "write_config",
]
