"""Route each input to the text transformer or the image pipeline."""

from __future__ import annotations

import logging
import os
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from PIL import Image, UnidentifiedImageError

from redpanda.config import RenderConfig
from redpanda.encoder import Encoder, build_encoder
from redpanda.errors import DecodeFailure, IoFailure, NotFound, RedpandaError
from redpanda.formats import SNIFF_SIZE, STDIN_NAME, is_image_path, looks_binary
from redpanda.resample import resize_to_bounds
from redpanda.terminal import Sink
from redpanda.text import TransformState, transform_stream

log = logging.getLogger(__name__)


class InputKind(Enum):
    TEXT = "text"
    IMAGE = "image"
    # Binary without an image suffix: tried as an image, printed as text if Pillow gives up
    BINARY = "binary"


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)


def load_image(source: BinaryIO, name: str) -> Image.Image:
    """Fully decode an image so its file can be closed straight away."""
    try:
        image = Image.open(source)
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeFailure(f"cannot decode image: {exc}", path=name, operation="decode") from exc
    return image


class Dispatcher:
    def __init__(
        self,
        config: RenderConfig,
        sink: Sink,
        state: TransformState | None = None,
        encoder: Encoder | None = None,
        stdin: BinaryIO | None = None,
    ):
        self.config = config
        self.sink = sink
        self.state = state if state is not None else TransformState()
        self.encoder = encoder if encoder is not None else build_encoder(config)
        self.stdin = stdin

    def run(self, names: list[str]) -> None:
        """Print every input in order. An empty list means standard input."""
        names = names or [STDIN_NAME]
        label = len(names) > 1
        for name in names:
            self.process(name, label=label)
        self.sink.flush()

    def process(self, name: str, label: bool = False) -> None:
        if name == STDIN_NAME:
            if self.stdin is None:
                raise NotFound("no standard input available", path=name, operation="open")
            self.print_text(self.stdin, name)
            return

        path = Path(name)
        # One open per input: FIFOs and process substitutions can only be read once
        try:
            fh = path.open("rb")
        except OSError as exc:
            raise NotFound(_reason(exc), path=name, operation="open") from exc
        with fh:
            kind = self.classify(path, fh)
            log.debug("%s: %s", name, kind.value)
            if kind is InputKind.TEXT:
                self.print_text(fh, name)
                return
            image = self.read_image(fh, name, fallback=kind is InputKind.BINARY)
            if image is None:
                return
        self.print_image(image, name)
        if label:
            self.sink.write(os.fsencode(name) + b"\n")
            self.sink.flush()

    def classify(self, path: Path, fh: BinaryIO) -> InputKind:
        """Decide from the suffix, or from a peek at the head that leaves ``fh`` unread."""
        if is_image_path(path):
            return InputKind.IMAGE
        if not self.config.sniff:
            return InputKind.TEXT
        try:
            head = fh.peek(SNIFF_SIZE)[:SNIFF_SIZE]
        except OSError as exc:
            raise IoFailure(f"read error: {_reason(exc)}", path=str(path), operation="read") from exc
        return InputKind.BINARY if looks_binary(head) else InputKind.TEXT

    def read_image(self, fh: BinaryIO, name: str, fallback: bool = False) -> Image.Image | None:
        """Decode ``fh``; with ``fallback``, print it as text instead when Pillow can't identify it."""
        if not fallback:
            return load_image(fh, name)

        try:
            source = fh if fh.seekable() else BytesIO(fh.read())
        except OSError as exc:
            raise IoFailure(f"read error: {_reason(exc)}", path=name, operation="read") from exc
        try:
            return load_image(source, name)
        except DecodeFailure as exc:
            if not isinstance(exc.__cause__, UnidentifiedImageError):
                raise
        source.seek(0)
        self.print_text(source, name)
        return None

    def print_text(self, source: BinaryIO, name: str) -> None:
        try:
            transform_stream(source, self.sink.write, self.config.text, self.state, flush=self.sink.line_flush())
        except OSError as exc:
            raise IoFailure(f"read error: {_reason(exc)}", path=name, operation="read") from exc

    def print_image(self, image: Image.Image, name: str) -> None:
        try:
            frame = self.encoder.encode(resize_to_bounds(image, self.config.bounds))
        except RedpandaError as exc:
            if exc.path is None:
                exc.path = name
            raise
        self.sink.write(frame)
        self.sink.flush()
