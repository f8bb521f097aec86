"""Kitty graphics protocol: PNG payload, base64 encoded, sent in escape-sequence chunks.

See https://sw.kovidgoyal.net/kitty/graphics-protocol/
"""

import base64
import logging
from collections.abc import Iterator
from io import BytesIO

from PIL import Image

from redpanda.errors import EncodeFailure
from redpanda.resample import normalise_mode

log = logging.getLogger(__name__)

CHUNK_SIZE = 4096

APC_START = b"\x1b_G"
STRING_TERMINATOR = b"\x1b\\"

# a=T transmit and display, f=100 PNG, t=d data follows inline
FIRST_CHUNK_KEYS = b"a=T,f=100,t=d"


def png_bytes(image: Image.Image) -> bytes:
    buffer = BytesIO()
    try:
        normalise_mode(image).save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodeFailure(f"cannot encode image as PNG: {exc}", operation="encode") from exc
    return buffer.getvalue()


def split_chunks(payload: bytes, size: int = CHUNK_SIZE) -> Iterator[tuple[bytes, bool]]:
    """Yield ``(chunk, more)`` pairs; ``more`` is False only for the last chunk."""
    offset = 0
    while offset < len(payload):
        chunk = payload[offset : offset + size]
        offset += size
        yield chunk, offset < len(payload)


def kitty_chunks(payload: bytes, size: int = CHUNK_SIZE) -> list[bytes]:
    """Frame base64 ``payload`` as a sequence of graphics commands."""
    frames = []
    for index, (chunk, more) in enumerate(split_chunks(payload, size)):
        keys = b"m=%d" % more
        if index == 0:
            keys = FIRST_CHUNK_KEYS + b"," + keys
        frames.append(APC_START + keys + b";" + chunk + STRING_TERMINATOR)
    return frames


class KittyEncoder:
    """Encodes images for terminals speaking the kitty graphics protocol."""

    name = "kitty"

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        self.chunk_size = chunk_size

    def encode(self, image: Image.Image) -> bytes:
        payload = base64.standard_b64encode(png_bytes(image))
        frames = kitty_chunks(payload, self.chunk_size)
        log.debug("kitty frame: %d base64 bytes in %d chunks", len(payload), len(frames))
        # Newline moves the cursor below the picture
        return b"".join(frames) + b"\n"
