"""Logging setup for tabtrail.

Protocol messages own stdout, so log records go to stderr and, optionally, to
``~/.tabtrail/logs/server.log``. Repeated initialization never duplicates
handlers.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from tabtrail.config import LogLevel
from tabtrail.paths import get_tabtrail_home

LOGGER_NAME = "tabtrail"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def server_log_path(base_dir: Path | None = None) -> Path:
    directory = base_dir or get_tabtrail_home() / "logs"
    return directory / "server.log"


def configure_base_logging(*, debug_enabled: bool, log_level: LogLevel | str) -> logging.Logger:
    """Route the root logger to stderr and set the ``tabtrail`` level."""

    root_level = logging.INFO if debug_enabled else logging.WARNING

    logging.basicConfig(
        level=root_level,
        stream=sys.__stderr__,
        format=LOG_FORMAT,
        force=True,
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_to_logging_level(log_level))
    return logger


def configure_file_logging(
    *,
    log_level: LogLevel | str = LogLevel.INFO,
    base_dir: Path | None = None,
) -> logging.Logger:
    """Attach a file handler to the ``tabtrail`` logger and return it.

    Subsequent calls return the same logger without adding another handler.
    """

    logger = logging.getLogger(LOGGER_NAME)
    level_value = _to_logging_level(log_level)
    logger.setLevel(level_value)

    if not any(isinstance(handler, logging.FileHandler) for handler in logger.handlers):
        path = server_log_path(base_dir)
        path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(level_value)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def _to_logging_level(value: LogLevel | str) -> int:
    mapping = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
    }
    if isinstance(value, LogLevel):
        return mapping[value]
    if isinstance(value, str):
        try:
            return mapping[LogLevel(value)]
        except ValueError:
            return logging.WARNING
    return logging.WARNING


__all__ = [
    "LOGGER_NAME",
    "configure_base_logging",
    "configure_file_logging",
    "server_log_path",
    "_to_logging_level",
]
