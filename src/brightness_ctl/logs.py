"""Log setup for the command line tool.

Verbosity is derived from counted ``-v``/``-q`` flags. The handler is attached
to the package logger only so third party libraries stay quiet.
"""

from __future__ import annotations

import logging
import os
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_ENV = "BRIGHTNESS_CTL_LOG"
PACKAGE_LOGGER = "brightness_ctl"


def log_level(verbose: int, quiet: int) -> int:
    delta = verbose - quiet
    if delta <= -2:
        return logging.ERROR
    if delta == -1:
        return logging.WARNING
    if delta == 0:
        return logging.INFO
    if delta == 1:
        return logging.DEBUG
    return TRACE


def level_from_env(default: int) -> int:
    """Return the level named by ``BRIGHTNESS_CTL_LOG``, or ``default``."""

    raw = os.environ.get(LOG_ENV, "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level
    return default


def setup_logging(level: int) -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(handler)
    return logger
