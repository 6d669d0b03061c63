"""Logging configuration for taskdock.

Two output channels:
- rich Console in the CLI for user-facing messages
- logging module for diagnostics (which platform was picked, which
  defaults were inferred, cleanup failures)

Usage:
    from taskdock.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("Inferred image: %s", image)

Enable debug output with ``taskdock --debug`` or ``TASKDOCK_DEBUG=1``.
"""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER = "taskdock"
DEBUG_ENV = "TASKDOCK_DEBUG"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_loggers: dict[str, logging.Logger] = {}
_initialized = False


def _get_log_level() -> int:
    """Determine log level from environment."""
    if os.environ.get(DEBUG_ENV, "").lower() in ("1", "true", "yes"):
        return logging.DEBUG
    return logging.WARNING


def _formatter(level: int) -> logging.Formatter:
    # line numbers only when debugging
    fmt = LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT
    return logging.Formatter(fmt, datefmt=DATE_FORMAT)


def _apply_level(root: logging.Logger, level: int) -> None:
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)
        handler.setFormatter(_formatter(level))


def _init_logging() -> None:
    """Give the taskdock namespace a stderr handler, once per process."""
    global _initialized
    if _initialized:
        return

    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        root.addHandler(logging.StreamHandler(sys.stderr))
    _apply_level(root, _get_log_level())
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the taskdock namespace.

    Args:
        name: Module name (typically __name__).

    Returns:
        Configured logger instance.
    """
    _init_logging()

    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return _loggers.setdefault(name, logging.getLogger(name))


def set_debug(enabled: bool = True) -> None:
    """Switch the taskdock loggers between DEBUG and WARNING."""
    _init_logging()
    _apply_level(logging.getLogger(ROOT_LOGGER), logging.DEBUG if enabled else logging.WARNING)
