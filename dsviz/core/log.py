"""Logging setup for the dsviz entry points.

Library modules only take a logger with ``logging.getLogger(__name__)``;
the CLI resolves the user's level name and configures the root logger.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_level(level: int | str) -> int:
    """Turn a level name such as ``"debug"`` or a numeric level into an int.

    Raises ValueError for names outside :data:`LOG_LEVELS`.
    """
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(
            f"unknown log level {level!r}; expected one of {', '.join(LOG_LEVELS)}"
        )
    return logging.getLevelName(name)


def setup_default_logging(level: int | str = "INFO") -> int:
    """Configure the root logger unless something already did; return the level."""
    lvl = resolve_level(level)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=lvl, format=LOG_FORMAT)
    return lvl


__all__ = ["LOG_FORMAT", "LOG_LEVELS", "resolve_level", "setup_default_logging"]
