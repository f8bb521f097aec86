import logging
import math

from PIL import Image

from redpanda.config import Bounds
from redpanda.errors import DecodeFailure

log = logging.getLogger(__name__)


def normalise_mode(image: Image.Image) -> Image.Image:
    """Convert to RGB, or RGBA when the image has any transparency."""
    if image.mode in ("RGB", "RGBA"):
        return image
    return image.convert("RGBA" if image.has_transparency_data else "RGB")


def fit_size(width: int, height: int, bounds: Bounds) -> tuple[int, int]:
    """Largest size with the same aspect ratio that fits in bounds. Never grows the image."""
    if width <= bounds.max_width and height <= bounds.max_height:
        return (width, height)
    ratio = min(bounds.max_width / width, bounds.max_height / height)
    # A 1000x1 strip into 10x10 would floor its height to 0
    return (max(1, math.floor(width * ratio)), max(1, math.floor(height * ratio)))


def resize_to_bounds(image: Image.Image, bounds: Bounds) -> Image.Image:
    if image.width == 0 or image.height == 0:
        raise DecodeFailure(f"image has no pixels ({image.width}x{image.height})", operation="resize")

    size = fit_size(image.width, image.height, bounds)
    if size == image.size:
        return image

    log.debug("resizing %dx%d to %dx%d", image.width, image.height, *size)
    return normalise_mode(image).resize(size, Image.Resampling.LANCZOS)
