import pytest

from redpanda.formats import IMAGE_EXTENSIONS, is_image_path, looks_binary


@pytest.mark.parametrize("name", ["a.png", "b.JPG", "c.Jpeg", "dir.d/e.webp", "f.tar.qoi", "g.AVIF", "h.tif"])
def test_image_suffixes(name):
    assert is_image_path(name)


@pytest.mark.parametrize("name", ["notes.txt", "png", ".png", "archive.png.gz", "Makefile", "image.svg"])
def test_non_image_names(name):
    assert not is_image_path(name)


def test_extension_set_is_complete():
    assert len(IMAGE_EXTENSIONS) == 16
    assert {"pnm", "pbm", "pgm", "ppm", "tga", "ico", "bmp", "gif"} <= IMAGE_EXTENSIONS


def test_looks_binary():
    assert looks_binary(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")
    assert not looks_binary(b"plain text\n\twith tabs\r\n\x1b[1m")
    assert not looks_binary(b"")
