"""
Logger factory and helpers.

Every module gets its logger from here:

    >>> from shared.logging import get_logger
    >>> log = get_logger(__name__)
    >>> log.info("comment_accepted", post_id=42)
"""

from __future__ import annotations

import structlog
from structlog.stdlib import BoundLogger

from shared.logging_config import configure_structlog, setup_logging


def get_logger(name: str) -> BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def log_with_context(logger: BoundLogger, **context) -> BoundLogger:
    """
    Bind context to a logger for all subsequent log calls.

    Example:
        >>> log = log_with_context(get_logger(__name__), post_id=42)
        >>> log.info("comment_rejected")  # Will include post_id
    """
    return logger.bind(**context)


__all__ = [
    "get_logger",
    "log_with_context",
    "configure_structlog",
    "setup_logging",
]
