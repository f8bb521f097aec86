import base64
from io import BytesIO

import numpy as np
from PIL import Image

from redpanda.kitty import CHUNK_SIZE, KittyEncoder, kitty_chunks, png_bytes, split_chunks
from tests.conftest import kitty_commands, kitty_payload


def noisy_image(size=(300, 200), mode="RGB"):
    rng = np.random.default_rng(7)
    channels = len(mode)
    return Image.fromarray(rng.integers(0, 256, (size[1], size[0], channels), dtype=np.uint8), mode)


def test_single_chunk_carries_all_keys():
    frames = kitty_chunks(b"QUJD")
    assert frames == [b"\x1b_Ga=T,f=100,t=d,m=0;QUJD\x1b\\"]


def test_chunks_are_flagged_until_the_last():
    payload = b"A" * (CHUNK_SIZE * 2 + 10)
    commands = kitty_commands(b"".join(kitty_chunks(payload)))
    assert [keys for keys, _ in commands] == [b"a=T,f=100,t=d,m=1", b"m=1", b"m=0"]
    assert [len(chunk) for _, chunk in commands] == [CHUNK_SIZE, CHUNK_SIZE, 10]


def test_exact_multiple_has_no_empty_trailing_chunk():
    payload = b"B" * (CHUNK_SIZE * 2)
    commands = kitty_commands(b"".join(kitty_chunks(payload)))
    assert [keys for keys, _ in commands] == [b"a=T,f=100,t=d,m=1", b"m=0"]


def test_split_chunks_respects_size():
    assert list(split_chunks(b"abcdefg", 3)) == [(b"abc", True), (b"def", True), (b"g", False)]
    assert list(split_chunks(b"", 3)) == []


def test_reassembled_chunks_reproduce_png():
    img = noisy_image()
    png = png_bytes(img)
    frames = kitty_chunks(base64.standard_b64encode(png))
    assert len(frames) > 1
    assert kitty_payload(b"".join(frames)) == png


def test_encode_produces_decodable_png():
    img = noisy_image((64, 48))
    frame = KittyEncoder().encode(img)
    assert frame.startswith(b"\x1b_Ga=T,f=100,t=d,")
    assert frame.endswith(b"\x1b\\\n")
    decoded = Image.open(BytesIO(kitty_payload(frame)))
    assert decoded.format == "PNG"
    assert decoded.size == (64, 48)
    assert decoded.convert("RGB").tobytes() == img.tobytes()


def test_encode_keeps_transparency():
    img = Image.new("RGBA", (4, 4), (10, 20, 30, 0))
    decoded = Image.open(BytesIO(kitty_payload(KittyEncoder().encode(img))))
    assert decoded.mode == "RGBA"
    assert decoded.getpixel((0, 0)) == (10, 20, 30, 0)


def test_encode_converts_other_modes():
    img = Image.new("CMYK", (4, 4), (0, 255, 255, 0))
    decoded = Image.open(BytesIO(kitty_payload(KittyEncoder().encode(img))))
    assert decoded.mode == "RGB"
    assert decoded.getpixel((0, 0)) == (255, 0, 0)


def test_custom_chunk_size():
    frame = KittyEncoder(chunk_size=16).encode(Image.new("RGB", (8, 8)))
    commands = kitty_commands(frame)
    assert len(commands) > 1
    assert all(len(chunk) == 16 for _, chunk in commands[:-1])
