"""
Logging configuration — set up once by the CLI entrypoint.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
what is configured here.

Console level precedence:
    --debug / --verbose / --quiet  >  FL_LOG_LEVEL env var  >  WARNING

A log file can be added with FL_LOG_FILE (and FL_LOG_FILE_LEVEL).
"""

from __future__ import annotations

import logging
import os
import sys

LEVEL_ENV_VAR = "FL_LOG_LEVEL"
FILE_ENV_VAR = "FL_LOG_FILE"
FILE_LEVEL_ENV_VAR = "FL_LOG_FILE_LEVEL"

_FMT_PLAIN = "%(message)s"
_FMT_INFO = "%(asctime)s [%(name)s] %(message)s"
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

# Loggers of libraries we call into (urllib for remote repositories)
_QUIET_LOGGERS = ("urllib3", "urllib")


def setup_logging(level: str | None = None, log_file: str | None = None,
                  log_file_level: str | None = None) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name. Falls back to FL_LOG_LEVEL, then WARNING.
        log_file: Optional log file path. Falls back to FL_LOG_FILE.
        log_file_level: Level for the file handler. Defaults to the console level.
    """
    console_level = _parse_level(level or os.environ.get(LEVEL_ENV_VAR))

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    log_file = log_file or os.environ.get(FILE_ENV_VAR)
    if log_file:
        file_level = _parse_level(log_file_level or os.environ.get(FILE_LEVEL_ENV_VAR)
                                  or logging.getLevelName(console_level))
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(fh)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    if console_level > logging.DEBUG:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # Errors inside logging handlers are not raised
    logging.raiseExceptions = False


def _console_formatter(level: int) -> logging.Formatter:
    if level <= logging.DEBUG:
        return logging.Formatter(_FMT_DETAIL, datefmt="%H:%M:%S")
    if level <= logging.INFO:
        return logging.Formatter(_FMT_INFO, datefmt="%H:%M:%S")
    return logging.Formatter(_FMT_PLAIN)


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric value (WARNING if unknown)."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
