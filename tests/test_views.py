import pytest

from exrpreview import PreviewBorrowError, PreviewImage, PreviewReleasedError, PreviewRgba


def _numbered(width, height):
    pixels = [PreviewRgba(i % 256, i // 256, 0, 255) for i in range(width * height)]
    return PreviewImage.with_pixels(width, height, pixels), pixels


def test_pixels_view_reads_in_order():
    image, pixels = _numbered(4, 3)
    view = image.pixels()
    assert len(view) == 12
    assert list(view) == pixels
    assert view[0] == pixels[0]
    assert view[-1] == pixels[-1]
    assert view[2:5] == pixels[2:5]
    assert view[::4] == pixels[::4]


def test_pixels_view_index_out_of_range():
    image, _ = _numbered(2, 2)
    with pytest.raises(IndexError):
        image.pixels()[4]
    with pytest.raises(IndexError):
        image.pixels()[-5]


def test_tobytes_is_interleaved_rgba():
    image = PreviewImage.with_pixels(2, 1, [PreviewRgba(1, 2, 3, 4), PreviewRgba(5, 6, 7, 8)])
    assert image.pixels().tobytes() == bytes([1, 2, 3, 4, 5, 6, 7, 8])


def test_view_tracks_later_writes():
    image = PreviewImage.with_dimensions(2, 2)
    view = image.pixels()
    image.set_pixel(1, 0, PreviewRgba.zero())
    assert view[1] == PreviewRgba.zero()


def test_read_only_view_has_no_assignment():
    image = PreviewImage.with_dimensions(1, 1)
    with pytest.raises(TypeError):
        image.pixels()[0] = PreviewRgba.zero()


def test_mut_pixels_writes_through():
    image = PreviewImage.with_dimensions(3, 2)
    pixels = image.mut_pixels()
    pixels[4] = PreviewRgba(1, 1, 1, 1)
    assert image.get_pixel(1, 1) == PreviewRgba(1, 1, 1, 1)
    pixels[-1] = PreviewRgba(2, 2, 2, 2)
    assert image.get_pixel(2, 1) == PreviewRgba(2, 2, 2, 2)


def test_mut_pixels_slice_assignment():
    image = PreviewImage.with_dimensions(2, 2)
    pixels = image.mut_pixels()
    pixels[1:3] = [PreviewRgba.zero(), PreviewRgba(3, 3, 3, 3)]
    assert list(image.pixels()) == [
        PreviewRgba(),
        PreviewRgba.zero(),
        PreviewRgba(3, 3, 3, 3),
        PreviewRgba(),
    ]
    with pytest.raises(ValueError):
        pixels[0:2] = [PreviewRgba.zero()]


def test_mut_pixels_fill_and_update():
    image = PreviewImage.with_dimensions(2, 2)
    pixels = image.mut_pixels()
    pixels.fill(PreviewRgba(9, 8, 7, 6))
    assert all(p == PreviewRgba(9, 8, 7, 6) for p in image.pixels())
    pixels.update(PreviewRgba(i, i, i, i) for i in range(4))
    assert image.get_pixel(1, 1) == PreviewRgba(3, 3, 3, 3)


def test_mut_pixels_rejects_non_pixel():
    image = PreviewImage.with_dimensions(1, 1)
    with pytest.raises(TypeError):
        image.mut_pixels()[0] = (0, 0, 0, 0)


def test_views_fail_after_close():
    image = PreviewImage.with_dimensions(2, 2)
    view = image.pixels()
    mutable = image.mut_pixels()
    image.close()
    with pytest.raises(PreviewReleasedError):
        len(view)
    with pytest.raises(PreviewReleasedError):
        view[0]
    with pytest.raises(PreviewReleasedError):
        mutable[0] = PreviewRgba()


def test_second_mutable_borrow_is_rejected():
    image = PreviewImage.with_dimensions(2, 2)
    with image.mut_pixels() as pixels:
        pixels[0] = PreviewRgba.zero()
        with pytest.raises(PreviewBorrowError):
            with image.mut_pixels():
                pass
    with image.mut_pixels() as pixels:
        pixels[1] = PreviewRgba.zero()
    assert image.get_pixel(1, 0) == PreviewRgba.zero()


def test_clone_and_close_rejected_while_borrowed():
    image = PreviewImage.with_dimensions(1, 1)
    with image.mut_pixels():
        with pytest.raises(PreviewBorrowError):
            image.clone()
        with pytest.raises(PreviewBorrowError):
            image.close()
    image.clone().close()
    image.close()
    assert image.closed


def test_borrow_released_on_error():
    image = PreviewImage.with_dimensions(1, 1)
    with pytest.raises(KeyError):
        with image.mut_pixels():
            raise KeyError("boom")
    image.close()
    assert image.closed
