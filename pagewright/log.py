"""Logging setup for Pagewright.

Modules obtain loggers with ``get_logger(__name__)``; the CLI calls
``configure_logging`` once per invocation before doing any work.
"""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream=None,
) -> None:
    """Configure the ``pagewright`` logger hierarchy.

    Each call replaces the handler installed by the previous one, so the
    handler always writes to the current stderr.

    Args:
        level: Logging level for the package logger.
        fmt: Log record format string.
        stream: Output stream, defaults to stderr.
    """
    global _handler
    logger = logging.getLogger("pagewright")
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(_handler)
    logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger. Configuration happens in configure_logging()."""
    return logging.getLogger(name)
