"""Sixel encoding with Pillow quantization and numpy band packing.

Sixel draws 6-pixel-high bands: each column of a band is one printable
character whose 6 low bits say which rows use the selected colour.
"""

import logging

import numpy as np
from PIL import Image

from redpanda.config import MAX_COLORS, MIN_COLORS
from redpanda.errors import EncodeFailure
from redpanda.resample import normalise_mode

log = logging.getLogger(__name__)

# DCS with 1:1 pixel aspect; P2=1 leaves unset pixels at the terminal background
DCS_START = b"\x1bP0;1;0q"
STRING_TERMINATOR = b"\x1b\\"

SIXEL_OFFSET = 63
BAND_HEIGHT = 6
# Runs shorter than this are cheaper written out than as !N<c>
MIN_RUN = 3


def composite_alpha(rgba: np.ndarray, background: tuple[int, int, int]) -> np.ndarray:
    """Flatten an (H, W, 4) uint8 array onto an opaque background, returning (H, W, 3) uint8."""
    fg = rgba[..., :3].astype(np.float32)
    alpha = rgba[..., 3:4].astype(np.float32) / 255.0
    bg = np.asarray(background, dtype=np.float32)

    blended = np.rint((1.0 - alpha) * bg + alpha * fg)
    # Fully transparent and fully opaque pixels must come out exact
    blended = np.where(alpha == 0.0, bg, blended)
    blended = np.where(alpha == 1.0, fg, blended)
    return blended.clip(0, 255).astype(np.uint8)


def _palette_registers(palette: list[int], count: int) -> bytes:
    parts = []
    for i in range(count):
        r, g, b = palette[i * 3 : i * 3 + 3]
        # Sixel colour components are percentages
        parts.append(b"#%d;2;%d;%d;%d" % (i, round(r * 100 / 255), round(g * 100 / 255), round(b * 100 / 255)))
    return b"".join(parts)


def _rle(values: np.ndarray) -> bytes:
    """Run-length encode a row of 6-bit sixel values."""
    if values.size == 0:
        return b""
    boundaries = np.flatnonzero(np.diff(values)) + 1
    starts = np.concatenate(([0], boundaries))
    ends = np.concatenate((boundaries, [values.size]))
    parts = []
    for start, end in zip(starts, ends):
        char = bytes((int(values[start]) + SIXEL_OFFSET,))
        count = int(end - start)
        if count >= MIN_RUN:
            parts.append(b"!%d" % count + char)
        else:
            parts.append(char * count)
    return b"".join(parts)


def _bands(indices: np.ndarray) -> bytes:
    """Encode an (H, W) array of palette indices as sixel bands."""
    height, width = indices.shape
    padded_height = -(-height // BAND_HEIGHT) * BAND_HEIGHT
    # -1 marks padding rows below the image so they never match a colour
    grid = np.full((padded_height, width), -1, dtype=np.int16)
    grid[:height] = indices
    weights = (1 << np.arange(BAND_HEIGHT, dtype=np.int16))[:, np.newaxis]

    out = []
    for top in range(0, padded_height, BAND_HEIGHT):
        band = grid[top : top + BAND_HEIGHT]
        colours = [int(c) for c in np.unique(band) if c >= 0]
        rows = []
        for colour in colours:
            bits = ((band == colour) * weights).sum(axis=0)
            # Trailing empty columns need not be sent
            last = np.flatnonzero(bits)[-1] + 1
            rows.append(b"#%d" % colour + _rle(bits[:last]))
        out.append(b"$".join(rows))
    return b"-".join(out)


def encode_sixel(pixels: bytes, width: int, height: int, colors: int | None = None) -> bytes:
    """Encode an interleaved RGB buffer as a complete sixel DCS string."""
    colors = MAX_COLORS if colors is None else colors
    if not MIN_COLORS <= colors <= MAX_COLORS:
        raise EncodeFailure(f"colour count must be between {MIN_COLORS} and {MAX_COLORS}, got {colors}", operation="encode")
    if width < 1 or height < 1 or len(pixels) != width * height * 3:
        raise EncodeFailure(f"pixel buffer of {len(pixels)} bytes does not match {width}x{height} RGB", operation="encode")

    try:
        quantized = Image.frombytes("RGB", (width, height), pixels).quantize(colors=colors)
    except (OSError, ValueError) as exc:
        raise EncodeFailure(f"cannot build sixel palette: {exc}", operation="encode") from exc

    palette = quantized.getpalette() or []
    indices = np.asarray(quantized, dtype=np.int16)
    used = int(indices.max()) + 1
    log.debug("sixel palette: %d of %d colours", used, colors)

    return b"".join(
        (
            DCS_START,
            b'"1;1;%d;%d' % (width, height),
            _palette_registers(palette, used),
            _bands(indices),
            STRING_TERMINATOR,
        )
    )


class SixelEncoder:
    """Encodes images for terminals speaking sixel, flattening transparency first."""

    name = "sixel"

    def __init__(self, colors: int | None = None, background: tuple[int, int, int] = (0, 0, 0)):
        self.colors = colors
        self.background = background

    def encode(self, image: Image.Image) -> bytes:
        image = normalise_mode(image)
        arr = np.asarray(image, dtype=np.uint8)
        if image.mode == "RGBA":
            arr = composite_alpha(arr, self.background)
        frame = encode_sixel(np.ascontiguousarray(arr).tobytes(), image.width, image.height, self.colors)
        log.debug("sixel frame: %dx%d, %d bytes", image.width, image.height, len(frame))
        return frame + b"\n"
