from __future__ import annotations

import logging
from typing import Optional

from .types import PIXEL_SIZE, PreviewRgba

logger = logging.getLogger(__name__)

UINT32_MAX = 0xFFFFFFFF
MAX_PIXEL_COUNT = UINT32_MAX

_DEFAULT_PIXEL = PreviewRgba().to_bytes()


class StorageError(Exception):
    """Failure reported by the storage engine."""


class StorageOverflowError(StorageError):
    pass


class StorageRangeError(StorageError):
    pass


def _check_dimension(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"Preview {name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= UINT32_MAX:
        raise StorageOverflowError(f"Preview {name} {value} does not fit in 32 bits")
    return value


def pixel_count(width: int, height: int) -> int:
    """Return width * height, rejecting products the engine cannot index."""
    count = _check_dimension("width", width) * _check_dimension("height", height)
    if count > MAX_PIXEL_COUNT:
        raise StorageOverflowError(
            f"Preview of {width}x{height} exceeds the maximum of {MAX_PIXEL_COUNT} pixels"
        )
    return count


class PreviewStorage:
    """Engine-side pixel storage behind a PreviewImage.

    Holds a contiguous RGBA byte array of width * height pixels. The owner is
    responsible for calling release() exactly once.
    """

    __slots__ = ("_width", "_height", "_data")

    def __init__(self, width: int, height: int, pixels: Optional[bytes] = None) -> None:
        count = pixel_count(width, height)
        size = count * PIXEL_SIZE
        if pixels is not None and len(pixels) != size:
            raise ValueError(
                f"Expected {count} pixels for a {width}x{height} preview, got {len(pixels) // PIXEL_SIZE}"
            )
        try:
            if pixels is None:
                data = bytearray(_DEFAULT_PIXEL * count)
            else:
                data = bytearray(pixels)
        except MemoryError as exc:
            raise StorageError(f"Cannot allocate {size} bytes for preview storage") from exc
        self._width = width
        self._height = height
        self._data: Optional[bytearray] = data
        logger.debug("Allocated preview storage %dx%d (%d bytes)", width, height, size)

    @classmethod
    def copy(cls, other: "PreviewStorage") -> "PreviewStorage":
        return cls(other.width, other.height, bytes(other._live()))

    def _live(self) -> bytearray:
        if self._data is None:
            raise StorageError("Preview storage has been released")
        return self._data

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def width(self) -> int:
        self._live()
        return self._width

    @property
    def height(self) -> int:
        self._live()
        return self._height

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise StorageRangeError(f"Pixel ({x}, {y}) is outside of {self._width}x{self._height}")
        return (y * self._width + x) * PIXEL_SIZE

    def pixel(self, x: int, y: int) -> memoryview:
        data = self._live()
        offset = self._offset(x, y)
        return memoryview(data)[offset : offset + PIXEL_SIZE]

    def pixel_const(self, x: int, y: int) -> memoryview:
        return self.pixel(x, y).toreadonly()

    def buffer(self) -> memoryview:
        return memoryview(self._live())

    def buffer_const(self) -> memoryview:
        return self.buffer().toreadonly()

    def release(self) -> None:
        if self._data is None:
            return
        logger.debug("Released preview storage %dx%d", self._width, self._height)
        self._data = None
