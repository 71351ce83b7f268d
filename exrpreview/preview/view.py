from __future__ import annotations

import operator
from collections.abc import Sequence
from typing import TYPE_CHECKING, Iterable, List, Union

from .types import PIXEL_SIZE, PreviewRgba

if TYPE_CHECKING:
    from .image import PreviewImage


def _resolve_index(index: int, count: int) -> int:
    i = operator.index(index)
    if i < 0:
        i += count
    if not 0 <= i < count:
        raise IndexError("pixel index out of range")
    return i


class PixelView(Sequence):
    """Read-only view over the pixels of a PreviewImage.

    The view does not copy anything. Every access goes back to the owning
    image, so using a view after the image was closed raises
    PreviewReleasedError.
    """

    __slots__ = ("_image",)

    def __init__(self, image: "PreviewImage") -> None:
        self._image = image

    def _data(self) -> memoryview:
        return self._image._pixel_buffer(writable=False)

    def __len__(self) -> int:
        return len(self._data()) // PIXEL_SIZE

    def __getitem__(self, index: Union[int, slice]) -> Union[PreviewRgba, List[PreviewRgba]]:
        data = self._data()
        count = len(data) // PIXEL_SIZE
        if isinstance(index, slice):
            return [self._read(data, i) for i in range(*index.indices(count))]
        return self._read(data, _resolve_index(index, count))

    @staticmethod
    def _read(data: memoryview, i: int) -> PreviewRgba:
        offset = i * PIXEL_SIZE
        return PreviewRgba.from_bytes(data[offset : offset + PIXEL_SIZE])

    def tobytes(self) -> bytes:
        """Return a copy of the pixels as interleaved RGBA bytes."""
        return self._data().tobytes()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._image!r})"


class MutablePixelView(PixelView):
    """Writable view over the pixels of a PreviewImage.

    Used as a context manager, the view holds an exclusive mutable borrow of
    the image until the block exits.
    """

    __slots__ = ("_held",)

    def __init__(self, image: "PreviewImage") -> None:
        super().__init__(image)
        self._held = False

    def _writable(self) -> memoryview:
        return self._image._pixel_buffer(writable=True)

    def __setitem__(self, index: Union[int, slice], value) -> None:
        data = self._writable()
        count = len(data) // PIXEL_SIZE
        if isinstance(index, slice):
            indices = range(*index.indices(count))
            values = list(value)
            if len(values) != len(indices):
                raise ValueError(
                    f"Cannot assign {len(values)} pixels to a slice of {len(indices)}"
                )
            for i, pixel in zip(indices, values):
                self._write(data, i, pixel)
            return
        self._write(data, _resolve_index(index, count), value)

    @staticmethod
    def _write(data: memoryview, i: int, pixel: PreviewRgba) -> None:
        if not isinstance(pixel, PreviewRgba):
            raise TypeError(f"Expected PreviewRgba, got {type(pixel).__name__}")
        offset = i * PIXEL_SIZE
        data[offset : offset + PIXEL_SIZE] = pixel.to_bytes()

    def fill(self, pixel: PreviewRgba) -> None:
        if not isinstance(pixel, PreviewRgba):
            raise TypeError(f"Expected PreviewRgba, got {type(pixel).__name__}")
        data = self._writable()
        data[:] = pixel.to_bytes() * (len(data) // PIXEL_SIZE)

    def update(self, pixels: Iterable[PreviewRgba]) -> None:
        """Overwrite every pixel, in order, from an iterable of the same length."""
        self[:] = pixels

    def __enter__(self) -> "MutablePixelView":
        self._image._acquire_mut()
        self._held = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._held:
            self._held = False
            self._image._release_mut()
