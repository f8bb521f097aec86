from pathlib import Path

# Raster formats Pillow can decode, matched case-insensitively on the suffix
IMAGE_EXTENSIONS = frozenset(
    {
        "png",
        "jpg",
        "jpeg",
        "gif",
        "bmp",
        "ico",
        "tiff",
        "tif",
        "webp",
        "pnm",
        "pbm",
        "pgm",
        "ppm",
        "tga",
        "qoi",
        "avif",
    }
)

# How much of a file to read when guessing whether it is binary
SNIFF_SIZE = 8192

STDIN_NAME = "-"


def is_image_path(path: str | Path) -> bool:
    suffix = Path(path).suffix
    return suffix[1:].lower() in IMAGE_EXTENSIONS


def looks_binary(head: bytes) -> bool:
    """Text never contains NUL, so any NUL byte marks the data as binary."""
    return b"\x00" in head
