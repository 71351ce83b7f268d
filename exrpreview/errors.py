from __future__ import annotations


class PreviewError(Exception):
    """Base class for errors raised by exrpreview."""


class PreviewOverflowError(PreviewError, OverflowError):
    """The requested image is bigger than the supported size."""


class PreviewOutOfRangeError(PreviewError, IndexError):
    """Pixel coordinates are outside of the image."""


class PreviewAllocationError(PreviewError):
    """The storage engine failed to build, copy or address an image."""


class PreviewReleasedError(PreviewError, ValueError):
    """The image storage has already been released."""


class PreviewBorrowError(PreviewError, RuntimeError):
    """The image is mutably borrowed by an active pixel view."""


class HeaderFormatError(PreviewError, ValueError):
    """Header or file bytes could not be decoded."""


__all__ = [
    "HeaderFormatError",
    "PreviewAllocationError",
    "PreviewBorrowError",
    "PreviewError",
    "PreviewOutOfRangeError",
    "PreviewOverflowError",
    "PreviewReleasedError",
]
