"""
Logging setup for every paygen entry point.

The CLI calls ``setup_logging`` once at startup; each module then just
does ``logger = logging.getLogger(__name__)``.

Console level precedence:
    CLI flag  >  PAYGEN_LOG_LEVEL  >  WARNING

A log file is added when PAYGEN_LOG_FILE is set, at PAYGEN_LOG_FILE_LEVEL
(or the console level when that is unset).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "PAYGEN_LOG_LEVEL"
ENV_FILE = "PAYGEN_LOG_FILE"
ENV_FILE_LEVEL = "PAYGEN_LOG_FILE_LEVEL"

_FMT_MINIMAL = "%(message)s"
_FMT_INFO = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s"
_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Chatty at INFO: the dev server logs every request, Faker logs provider lookups.
_NOISY_LOGGERS = ("werkzeug", "faker", "faker.factory")


def resolve_level(cli_level: str | None = None) -> str:
    """Pick the console level from the CLI flag, then the environment."""
    return cli_level or os.environ.get(ENV_LEVEL) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name.
        log_file: Optional log file path. Falls back to PAYGEN_LOG_FILE.
        log_file_level: Level for the file handler. Falls back to
            PAYGEN_LOG_FILE_LEVEL, then to ``level``.
        quiet_third_party: Hold noisy library loggers at WARNING unless
            running at DEBUG.
    """
    console_level = _parse_level(level)
    log_file = log_file or os.environ.get(ENV_FILE)
    log_file_level = log_file_level or os.environ.get(ENV_FILE_LEVEL)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_SHORT
    elif console_level <= logging.INFO:
        fmt, datefmt = _FMT_INFO, _DATEFMT_SHORT
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_FILE))
        root.addHandler(handler)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
