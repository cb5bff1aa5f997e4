"""Logging for the ``expense_tracker`` package.

Library modules only ask for loggers through :func:`get_logger`; output is
switched on by the Streamlit entry point calling :func:`configure_logging`.
"""

from __future__ import annotations

import logging
import os

_PACKAGE = "expense_tracker"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Send package logs to stderr at ``EXPENSE_TRACKER_LOG_LEVEL`` (default INFO).

    Safe to call on every Streamlit rerun; the handler is only added once.
    """
    logger = logging.getLogger(_PACKAGE)
    if any(type(h) is logging.StreamHandler for h in logger.handlers):
        return
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_level_from_env())
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    package_logger = logging.getLogger(_PACKAGE)
    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
