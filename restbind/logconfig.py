"""Logging setup shared by the CLI and the protoc plugin."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "RESTBIND_LOG_LEVEL"

_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_HANDLER_NAME = "restbind-stderr"


def configure_logging(level: Optional[str] = None) -> int:
    """Route ``restbind`` log records to stderr at the requested level.

    The level comes from ``level`` or the ``RESTBIND_LOG_LEVEL`` environment
    variable and defaults to ``warning``.  Stdout is never used: under protoc
    it carries the plugin response.
    """
    name = (level or os.getenv(LOG_LEVEL_ENV, "warning")).lower()
    numeric_level = _LEVEL_MAP.get(name, logging.WARNING)

    logger = logging.getLogger("restbind")
    logger.setLevel(numeric_level)
    if not any(getattr(h, "name", None) == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    return numeric_level


__all__ = ["LOG_LEVEL_ENV", "configure_logging"]
