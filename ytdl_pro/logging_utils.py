"""Logging utilities (single package logger, quiet unless verbose)."""

from __future__ import annotations
import logging
from typing import Optional

LOGGER_NAME = "ytdl_pro"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    global _LOGGER
    if _LOGGER is None:
        logger = logging.getLogger(LOGGER_NAME)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        # User-facing messages go through rich; the log only speaks up on problems
        logger.setLevel(logging.WARNING)
        _LOGGER = logger
    return _LOGGER


def set_verbose(verbose: bool) -> None:
    """Verbose mode surfaces discovery, built command lines and exit codes."""
    get_logger().setLevel(logging.DEBUG if verbose else logging.WARNING)
