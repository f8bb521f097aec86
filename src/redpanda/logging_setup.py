"""Stderr logging for the rp command."""

from __future__ import annotations

import logging
import sys

_LOGGER_NAME = "redpanda"


def configure_logging(debug: bool = False) -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    if logger.handlers:
        return logger

    # stdout carries file content and image frames only
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
