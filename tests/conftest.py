import base64
import logging
import re

import pytest
from PIL import Image

from redpanda.logging_setup import _LOGGER_NAME

KITTY_COMMAND = re.compile(rb"\x1b_G([^;]*);([^\x1b]*)\x1b\\")


def kitty_commands(data: bytes) -> list[tuple[bytes, bytes]]:
    """Split output into (keys, chunk) pairs for every kitty graphics command."""
    return KITTY_COMMAND.findall(data)


def kitty_payload(data: bytes) -> bytes:
    """Reassemble and decode the PNG carried by kitty graphics commands."""
    return base64.standard_b64decode(b"".join(chunk for _, chunk in kitty_commands(data)))


def save_image(path, size=(10, 10), mode="RGB", colour=(255, 0, 0), fmt=None):
    Image.new(mode, size, colour).save(path, format=fmt)
    return path


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
