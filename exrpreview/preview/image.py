from __future__ import annotations

import logging
import operator
import weakref
from typing import Optional, Sequence

from ..errors import (
    PreviewAllocationError,
    PreviewBorrowError,
    PreviewOutOfRangeError,
    PreviewOverflowError,
    PreviewReleasedError,
)
from .storage import PreviewStorage, StorageError, StorageOverflowError
from .types import PreviewRgba, pixels_to_bytes
from .view import MutablePixelView, PixelView

logger = logging.getLogger(__name__)


def _build_storage(width: int, height: int, data: Optional[bytes]) -> PreviewStorage:
    try:
        return PreviewStorage(width, height, data)
    except StorageOverflowError as exc:
        raise PreviewOverflowError(str(exc)) from exc
    except StorageError as exc:
        raise PreviewAllocationError(str(exc)) from exc


class PreviewImage:
    """A usually small, low dynamic range image stored in an image file's header.

    The image exclusively owns its pixel storage. ``clone()`` makes a deep
    copy, and the storage is released exactly once: by ``close()``, by leaving
    a ``with`` block, or when the image is garbage collected.
    """

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        pixels: Optional[Sequence[PreviewRgba]] = None,
    ) -> None:
        data = None if pixels is None else pixels_to_bytes(pixels)
        self._adopt(_build_storage(width, height, data))

    def _adopt(self, storage: PreviewStorage) -> None:
        self._storage: Optional[PreviewStorage] = storage
        self._finalizer = weakref.finalize(self, storage.release)
        self._mut_borrowed = False

    @classmethod
    def _from_storage(cls, storage: PreviewStorage) -> "PreviewImage":
        image = cls.__new__(cls)
        image._adopt(storage)
        return image

    @classmethod
    def empty(cls) -> "PreviewImage":
        """Create a preview with width = 0 and height = 0."""
        return cls.with_dimensions(0, 0)

    @classmethod
    def with_dimensions(cls, width: int, height: int) -> "PreviewImage":
        """Create an opaque black preview of the given size.

        Raises PreviewOverflowError if the image is bigger than the supported
        size and PreviewAllocationError if the storage cannot be built.
        """
        return cls(width, height)

    @classmethod
    def with_pixels(cls, width: int, height: int, pixels: Sequence[PreviewRgba]) -> "PreviewImage":
        """Create a preview holding a copy of ``pixels`` (row-major, width * height)."""
        return cls(width, height, pixels)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PreviewImage":
        """Create a preview from interleaved RGBA bytes."""
        return cls._from_storage(_build_storage(width, height, bytes(data)))

    # -- lifecycle ---------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._storage is None

    def _live_storage(self) -> PreviewStorage:
        storage = self._storage
        if storage is None:
            raise PreviewReleasedError("Preview image has been released")
        return storage

    def _check_not_borrowed(self, action: str) -> None:
        if self._mut_borrowed:
            raise PreviewBorrowError(f"Cannot {action} a preview image while its pixels are mutably borrowed")

    def close(self) -> None:
        if self._storage is None:
            return
        self._check_not_borrowed("close")
        self._storage = None
        self._finalizer()

    def __enter__(self) -> "PreviewImage":
        self._live_storage()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def clone(self) -> "PreviewImage":
        storage = self._live_storage()
        self._check_not_borrowed("clone")
        try:
            copied = PreviewStorage.copy(storage)
        except StorageError as exc:
            raise PreviewAllocationError("Error invoking copy constructor") from exc
        logger.debug("Cloned preview image %dx%d", copied.width, copied.height)
        return type(self)._from_storage(copied)

    def __copy__(self) -> "PreviewImage":
        return self.clone()

    def __deepcopy__(self, memo) -> "PreviewImage":
        return self.clone()

    # -- dimensions --------------------------------------------------------

    @property
    def width(self) -> int:
        storage = self._live_storage()
        try:
            return storage.width
        except StorageError as exc:
            raise RuntimeError("Error getting 'width' property") from exc

    @property
    def height(self) -> int:
        storage = self._live_storage()
        try:
            return storage.height
        except StorageError as exc:
            raise RuntimeError("Error getting 'height' property") from exc

    # -- whole buffer ------------------------------------------------------

    def _pixel_buffer(self, writable: bool) -> memoryview:
        storage = self._live_storage()
        try:
            return storage.buffer() if writable else storage.buffer_const()
        except StorageError as exc:
            raise RuntimeError("Error getting pixels") from exc

    def _acquire_mut(self) -> None:
        self._live_storage()
        if self._mut_borrowed:
            raise PreviewBorrowError("Preview image pixels are already mutably borrowed")
        self._mut_borrowed = True

    def _release_mut(self) -> None:
        self._mut_borrowed = False

    def pixels(self) -> PixelView:
        """Return a read-only view over the pixels."""
        self._live_storage()
        return PixelView(self)

    def mut_pixels(self) -> MutablePixelView:
        """Return a writable view over the pixels."""
        self._live_storage()
        return MutablePixelView(self)

    # -- single pixel ------------------------------------------------------

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x: int, y: int, value: PreviewRgba) -> None:
        """Set the pixel at (x, y).

        Raises PreviewOutOfRangeError if the coordinates are outside of the
        image and PreviewAllocationError if the pixel cannot be addressed.
        """
        if not isinstance(value, PreviewRgba):
            raise TypeError(f"Expected PreviewRgba, got {type(value).__name__}")
        x, y = operator.index(x), operator.index(y)
        if not self._in_bounds(x, y):
            raise PreviewOutOfRangeError(f"Pixel ({x}, {y}) is outside of {self.width}x{self.height}")
        storage = self._live_storage()
        try:
            with storage.pixel(x, y) as target:
                target[:] = value.to_bytes()
        except StorageError as exc:
            raise PreviewAllocationError(f"Cannot address pixel ({x}, {y})") from exc

    def get_pixel(self, x: int, y: int) -> Optional[PreviewRgba]:
        """Return the pixel at (x, y).

        Returns None both when the coordinates are outside of the image and
        when the pixel cannot be addressed; use pixel() to tell them apart.
        """
        x, y = operator.index(x), operator.index(y)
        if not self._in_bounds(x, y):
            return None
        storage = self._live_storage()
        try:
            with storage.pixel_const(x, y) as source:
                return PreviewRgba.from_bytes(source)
        except StorageError as exc:
            logger.debug("Lookup of pixel (%d, %d) failed: %s", x, y, exc)
            return None

    def pixel(self, x: int, y: int) -> PreviewRgba:
        """Return the pixel at (x, y), raising instead of returning None."""
        x, y = operator.index(x), operator.index(y)
        if not self._in_bounds(x, y):
            raise PreviewOutOfRangeError(f"Pixel ({x}, {y}) is outside of {self.width}x{self.height}")
        storage = self._live_storage()
        try:
            with storage.pixel_const(x, y) as source:
                return PreviewRgba.from_bytes(source)
        except StorageError as exc:
            raise PreviewAllocationError(f"Cannot address pixel ({x}, {y})") from exc

    def __repr__(self) -> str:
        if self._storage is None:
            return f"<{type(self).__name__} closed>"
        return f"<{type(self).__name__} {self.width}x{self.height}>"
