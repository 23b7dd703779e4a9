"""Logging configuration for AI Code Review."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

PACKAGE_LOGGER = "ai_code_review"

# Default log format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s: %(message)s"


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    stream: TextIO | None = None,
    quiet: bool = False,
) -> None:
    """
    Configure logging for the application.

    Only the package logger is touched; the root logger is left alone so
    that embedding applications keep their own configuration.

    Args:
        level: Logging level (e.g., logging.INFO, "DEBUG")
        format_string: Custom format string (picked from the level if None)
        stream: Output stream (defaults to stderr)
        quiet: If True, suppress all output except errors
    """
    level = logging.ERROR if quiet else _coerce_level(level)

    if format_string is None:
        format_string = SIMPLE_FORMAT if level >= logging.INFO else DEFAULT_FORMAT

    if stream is None:
        stream = sys.stderr

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    package_logger.addHandler(handler)

    package_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger namespaced under the package.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"

    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """Set the log level for the package logger and its handlers."""
    level = _coerce_level(level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
