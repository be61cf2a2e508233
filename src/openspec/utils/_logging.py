"""Logging utilities for OpenSpec.

This module provides a standalone structlog logger factory that writes
JSON-formatted or text-formatted logs to a file. Loggers are self-contained
and never modify global structlog configuration, so nothing is ever written
to stdout where it could corrupt JSON command output.
"""

from __future__ import annotations

import logging
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

from openspec.config import get_default_log_file
from openspec.config._settings import ENV_DEBUG

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, OPENSPEC_DEBUG overrides to DEBUG level.
    """
    if respect_env and getenv(ENV_DEBUG, None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def _create_logger(
    log_file_path: str,
    *,
    log_level: int,
    log_format: LogFormatType = "json",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger writing to the specified file.

    Args:
        log_file_path: Path to the log file (opened in append mode).
        log_level: Log level threshold.
        log_format: Output format, either "json" or "text".
    """
    log_path = Path(log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    logger_factory = structlog.WriteLoggerFactory(file=log_path.open("a"))

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
        ),
    )


def create_null_logger() -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger that discards everything.

    Used when the log file cannot be opened so commands still run.
    """
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.ReturnLogger(),
            processors=[],
            wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
            context_class=dict,
        ),
    )


def create_cli_logger(
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: str = "",
    command: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger for CLI commands.

    Creates a standalone structlog logger that writes structured logs to
    either the given file or the platform log directory
    (``~/.local/state/openspec/log/cli.log`` on Linux).

    The log level is determined by (in order of precedence):
    1. OPENSPEC_DEBUG environment variable (if set, enables DEBUG level)
    2. The ``level`` parameter

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to log file (uses the default if empty).
        command: Name of the CLI command, bound to all entries.

    Returns:
        A FilteringBoundLogger instance configured for CLI logging.
    """
    effective_file = log_file if log_file else str(get_default_log_file())
    effective_level = _log_level_from_string(level, respect_env=True)

    logger = _create_logger(
        effective_file,
        log_level=effective_level,
        log_format=log_format,
    )

    if command:
        return logger.bind(command=command)
    return logger
