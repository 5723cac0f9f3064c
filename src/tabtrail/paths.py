"""Common path utilities for tabtrail."""

from __future__ import annotations

import os
from pathlib import Path


def get_tabtrail_home() -> Path:
    """Return the base tabtrail directory, honoring TABTRAIL_HOME if set."""

    env_path = os.environ.get("TABTRAIL_HOME")
    return Path(env_path).expanduser() if env_path else Path.home() / ".tabtrail"


def default_config_path() -> Path:
    return get_tabtrail_home() / "config.toml"


__all__ = ["get_tabtrail_home", "default_config_path"]
