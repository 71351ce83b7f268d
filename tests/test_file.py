import pytest

from exrpreview import Header, HeaderFormatError, PreviewImage, PreviewRgba, read_file, read_header, write_file
from exrpreview.file import MAGIC, build_file, parse_file
from exrpreview.rendering import preview_from_linear

PREVIEW_WIDTH = 128
PREVIEW_HEIGHT = 64


def _linear_samples(width, height):
    samples = []
    for y in range(height):
        for x in range(width):
            samples.append((x / (width - 1), y / (height - 1), (x + y) / (width + height), 1.0 - x / width))
    return samples


def test_read_file_without_preview(tmp_path):
    path = tmp_path / "plain.exrp"
    write_file(path, Header.from_dimensions(32, 32))
    header = read_header(path)
    assert not header.has_preview_image()
    assert header.preview_image() is None


def test_preview_roundtrip(tmp_path):
    path = tmp_path / "preview_rtrip.exrp"
    samples = _linear_samples(PREVIEW_WIDTH, PREVIEW_HEIGHT)
    preview = preview_from_linear(PREVIEW_WIDTH, PREVIEW_HEIGHT, samples)

    header = Header.from_dimensions(PREVIEW_WIDTH * 4, PREVIEW_HEIGHT * 4)
    header.set_preview_image(preview)
    write_file(path, header, b"pixel data")

    with read_file(path) as image_file:
        assert image_file.payload == b"pixel data"
        header = image_file.header
        assert header.has_preview_image()
        stored = header.preview_image()
        assert stored.width == PREVIEW_WIDTH
        assert stored.height == PREVIEW_HEIGHT
        pixels = stored.pixels()
        assert len(pixels) == PREVIEW_WIDTH * PREVIEW_HEIGHT
        assert any(pixel != PreviewRgba.zero() for pixel in pixels)
        for y in range(PREVIEW_HEIGHT):
            for x in range(PREVIEW_WIDTH):
                expected = PreviewRgba.from_f16(*samples[x + PREVIEW_WIDTH * y])
                actual = pixels[x + PREVIEW_WIDTH * y]
                assert actual.r == expected.r, f"Red value not matching for pixel at x: {x} y: {y}"
                assert actual.g == expected.g, f"Green value not matching for pixel at x: {x} y: {y}"
                assert actual.b == expected.b, f"Blue value not matching for pixel at x: {x} y: {y}"
                assert actual.a == expected.a, f"Alpha value not matching for pixel at x: {x} y: {y}"
    assert stored.closed


def test_build_file_starts_with_magic():
    data = build_file(Header())
    assert data.startswith(MAGIC)
    parsed = parse_file(data)
    assert len(parsed.header) == 0
    assert parsed.payload == b""


def test_bad_magic_rejected():
    data = bytearray(build_file(Header()))
    data[0] = 0
    with pytest.raises(HeaderFormatError, match="magic"):
        parse_file(bytes(data))


def test_unsupported_version_rejected():
    data = bytearray(build_file(Header()))
    data[4] = 3
    with pytest.raises(HeaderFormatError, match="version"):
        parse_file(bytes(data))


def test_checksum_mismatch_rejected():
    header = Header()
    header.set_preview_image(PreviewImage.with_dimensions(2, 2))
    data = bytearray(build_file(header))
    # flip a byte inside the preview pixels
    index = data.index(b"\x00\x00\x00\xff")
    data[index] = 0x10
    with pytest.raises(HeaderFormatError, match="checksum"):
        parse_file(bytes(data))


@pytest.mark.parametrize("cut", [1, 5, 9])
def test_truncated_file_rejected(cut):
    header = Header.from_dimensions(2, 2)
    data = build_file(header, b"abcd")
    with pytest.raises(HeaderFormatError):
        parse_file(data[:-cut])


def test_written_preview_is_independent_of_caller(tmp_path):
    path = tmp_path / "copy.exrp"
    preview = PreviewImage.with_pixels(1, 1, [PreviewRgba(10, 20, 30, 40)])
    header = Header()
    header.set_preview_image(preview)
    preview.set_pixel(0, 0, PreviewRgba.zero())
    write_file(path, header)
    assert read_header(path).preview_image().get_pixel(0, 0) == PreviewRgba(10, 20, 30, 40)
