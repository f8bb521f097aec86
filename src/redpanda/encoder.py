from __future__ import annotations

from typing import Protocol

from PIL import Image

from redpanda.config import GraphicsProtocol, RenderConfig
from redpanda.kitty import KittyEncoder
from redpanda.sixel import SixelEncoder


class Encoder(Protocol):
    name: str

    def encode(self, image: Image.Image) -> bytes:
        """Turn a resized image into one complete, self-delimiting terminal frame."""
        ...


def build_encoder(config: RenderConfig) -> Encoder:
    if config.protocol is GraphicsProtocol.SIXEL:
        return SixelEncoder(colors=config.colors, background=config.background)
    return KittyEncoder()
