"""Logging setup for the bridge.

Stdout carries the MCP protocol, so every handler writes to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..config import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER = "jetbridge"


def configure_logging(config: LoggingConfig, stream: Optional[Any] = None) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Verbose diagnostics are only emitted when logging is enabled; otherwise
    warnings and errors still get through.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    if config.enabled:
        logger.setLevel(config.level.upper())
    else:
        logger.setLevel(logging.WARNING)
    logger.propagate = False
    return logger


def preview(text: Optional[str], limit: int = 100) -> str:
    """Shorten a response body for log output."""
    if text is None:
        return "<none>"
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
