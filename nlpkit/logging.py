"""Logging setup for nlpkit.

Module loggers live under the ``nlpkit`` namespace and inherit their level
from the package logger. ``NLPKIT_LOG_LEVEL`` sets the initial level and
:func:`set_log_level` changes it at runtime. Handlers are never attached;
applications configure output.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Final, Union

PACKAGE_LOGGER_NAME: Final[str] = "nlpkit"


def _parse_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _initial_level() -> int:
    try:
        return _parse_level(os.getenv("NLPKIT_LOG_LEVEL", "INFO"))
    except ValueError:
        return logging.INFO


_package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
_package_logger.setLevel(_initial_level())

# Loggers outside the namespace that follow the package level
_foreign_loggers: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger without altering global handlers.

    Loggers outside the ``nlpkit`` namespace (scripts run as ``__main__``)
    get the package level set on them directly, and :func:`set_log_level`
    keeps updating them.
    """
    logger = logging.getLogger(name)
    if name != PACKAGE_LOGGER_NAME and not name.startswith(PACKAGE_LOGGER_NAME + "."):
        logger.setLevel(_package_logger.level)
        _foreign_loggers[name] = logger
    return logger


def set_log_level(level: Union[int, str]) -> None:
    """Set the level of every nlpkit logger, e.g. ``set_log_level("DEBUG")``."""
    value = _parse_level(level)
    _package_logger.setLevel(value)
    for logger in _foreign_loggers.values():
        logger.setLevel(value)
