"""Console logging setup for the dictionary application."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

PACKAGE_LOGGER = "rucheng_dialect"
LOG_LEVEL_ENV = "RUCHENG_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Per-request lines from the HTTP client drown out lifecycle events.
QUIET_LOGGERS = ("httpx", "httpcore")

_handler: Optional[logging.Handler] = None


def _level_from(value: str | int | None) -> int:
    if value is None or value == "":
        return logging.INFO
    if isinstance(value, int):
        return value
    name = str(value).strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str | int] = None, *, force: bool = False) -> logging.Logger:
    """Attach a stderr handler to the ``rucheng_dialect`` logger.

    ``level`` wins over ``RUCHENG_LOG_LEVEL``; both fall back to ``INFO``.
    The root logger is left alone so host applications keep their own
    handlers. A second call keeps the existing setup unless ``force`` is set,
    in which case the handler is swapped for a fresh one at the new level.
    """

    global _handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None and not force:
        return logger

    resolved = _level_from(level if level is not None else os.environ.get(LOG_LEVEL_ENV))

    if _handler is not None:
        logger.removeHandler(_handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    _handler = handler

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))

    return logger


__all__ = ["LOG_LEVEL_ENV", "PACKAGE_LOGGER", "configure_logging"]
