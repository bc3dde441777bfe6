"""logger.py - Logging helpers for FileTrie"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_LEVEL_ENV = "FILETRIE_LOG_LEVEL"

logging.getLogger("filetrie").addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the ``filetrie`` namespace."""
    if name != "filetrie" and not name.startswith("filetrie."):
        name = f"filetrie.{name}"
    return logging.getLogger(name)


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    The level falls back to ``$FILETRIE_LOG_LEVEL`` and then WARNING.
    Calling this twice does not add a second handler.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        level = level.upper()
    root = logging.getLogger("filetrie")
    root.setLevel(level)
    if not any(getattr(h, "_filetrie", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._filetrie = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root
