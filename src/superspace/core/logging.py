"""Logging configuration.

stdout carries the wire protocol, so diagnostics only ever go to stderr
or to an optional log file.
"""
from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level state
_handlers: list[logging.Handler] = []


def configure_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    level: int = logging.DEBUG,
) -> None:
    """Attach stderr and/or file handlers to the package logger.

    Args:
        verbose: Log to stderr when True
        log_file: Optional path to append log records to
        level: Logging level for the attached handlers
    """
    reset_logging()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        _handlers.append(stream_handler)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        _handlers.append(file_handler)

    pkg_logger = logging.getLogger("superspace")
    for handler in _handlers:
        handler.setLevel(level)
        pkg_logger.addHandler(handler)
    if _handlers:
        pkg_logger.setLevel(level)


def reset_logging() -> None:
    """Remove and close handlers added by configure_logging."""
    pkg_logger = logging.getLogger("superspace")
    while _handlers:
        handler = _handlers.pop()
        pkg_logger.removeHandler(handler)
        handler.close()


def log_exception(
    error: Exception,
    context: str = "",
    include_traceback: bool = True,
) -> str:
    """Log an exception with full details and return a user-facing message.

    Args:
        error: The exception to log
        context: Additional context about what was happening
        include_traceback: Whether to include the active traceback in the log

    Returns:
        Message suitable for an error screen (no traceback)
    """
    logger = logging.getLogger("superspace")

    error_msg = str(error)
    user_msg = f"{context}: {error_msg}" if context else error_msg

    if include_traceback:
        tb_str = traceback.format_exc()
        logger.error(f"{user_msg}\n{type(error).__name__}\n\nTraceback:\n{tb_str}")
    else:
        logger.error(f"{type(error).__name__}: {user_msg}")

    return user_msg
