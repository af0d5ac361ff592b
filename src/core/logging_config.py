"""Structured logging configuration.

This module initializes structlog with a stable JSON format on stderr.
Console status markers for operators live in ``cli.console``.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_LOG_LEVEL = logging.INFO


def configure_logging(verbose: bool) -> None:
    """Set the global structured log level.

    Args:
        verbose: Emit debug events when true.
    """
    global _LOG_LEVEL
    _LOG_LEVEL = logging.DEBUG if verbose else logging.INFO
    _configure_structlog()


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    if not structlog.is_configured():
        _configure_structlog()
    return structlog.get_logger(name)


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_LOG_LEVEL),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
