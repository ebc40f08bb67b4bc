"""Logging utilities for the crossword game engine."""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "CROSSWORD_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def level_from_env(default: int = logging.INFO) -> int:
    """Resolve the log level named by ``CROSSWORD_LOG_LEVEL``."""

    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def configure_logging(level: Optional[int] = None) -> None:
    """Install a single stream handler on the root logger.

    Hosts embedding the engine may call this once at startup; otherwise the
    first :func:`get_logger` call installs it with the environment level.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level if level is not None else level_from_env())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "crossword_game")
