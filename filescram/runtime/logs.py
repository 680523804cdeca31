"""Logging setup for the interactive session.

Records never go to the terminal while it is in raw mode: either a file
handler is installed or the package logger gets a ``NullHandler``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

DEBUG_ENV_VAR = "FILESCRAM_DEBUG"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_LOG_FILENAME = "filescram.log"


def default_debug_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / DEBUG_LOG_FILENAME


def configure_logging(log_file: Path | None = None, level: str | int = logging.WARNING) -> logging.Logger:
    """Attach one handler to the ``filescram`` logger and return it.

    ``FILESCRAM_DEBUG`` forces debug level and, without an explicit
    ``log_file``, logs to the per-user log directory.
    """
    logger = logging.getLogger(APP_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if os.environ.get(DEBUG_ENV_VAR):
        level = logging.DEBUG
        if log_file is None:
            log_file = default_debug_log_path()

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)
    logger.propagate = False

    if log_file is None:
        logger.addHandler(logging.NullHandler())
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["DEBUG_ENV_VAR", "configure_logging", "default_debug_log_path"]
