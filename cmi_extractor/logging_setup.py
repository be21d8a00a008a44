"""Central logging configuration for the ``cmi_extractor`` package.

- ``configure_logging(...)`` attaches one ``StreamHandler`` to the package
  logger. Entry points (CLI, web app) call it once at startup.
- ``get_logger(name)`` returns a module logger and makes sure the package
  logger has a ``NullHandler`` while nothing is configured.

Library modules never attach handlers themselves.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

from .config import LOG_FORMAT, LOG_LEVEL_ENV

_PKG_LOGGER_NAME = "cmi_extractor"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return logging.INFO
    env_val = os.getenv(LOG_LEVEL_ENV)
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package logger exactly once.

    :param level: Level as ``int`` or name. ``None`` falls back to the
        ``CMI_EXTRACTOR_LOG_LEVEL`` environment variable, then ``WARNING``
    :param fmt: Optional format string, defaults to ``config.LOG_FORMAT``
    :param stream: Output stream of the handler
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    stream_handler = logging.StreamHandler(stream)
    stream_handler.setFormatter(logging.Formatter(fmt or LOG_FORMAT))

    logger.setLevel(_parse_level(level))
    logger.addHandler(stream_handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, keeping the package silent until it is configured."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
