from __future__ import annotations

import logging
import os
import sys

from .json_formatter import JSONFormatter

_LOGGER_NAME = "zava"
_CONFIGURED_ATTR = "_zava_json_logging"


def configure_logging() -> logging.Logger:
    """Attach a single JSON stdout handler to the ``zava`` logger.

    Safe to call more than once; the level is re-read from ``ZAVA_LOG_LEVEL``.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    level = os.getenv("ZAVA_LOG_LEVEL", "INFO").strip().upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.propagate = False

    if not any(getattr(handler, _CONFIGURED_ATTR, False) for handler in logger.handlers):
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(JSONFormatter())
        setattr(handler, _CONFIGURED_ATTR, True)
        logger.addHandler(handler)

    return logger
