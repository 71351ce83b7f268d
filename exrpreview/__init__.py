from .errors import (
    HeaderFormatError,
    PreviewAllocationError,
    PreviewBorrowError,
    PreviewError,
    PreviewOutOfRangeError,
    PreviewOverflowError,
    PreviewReleasedError,
)
from .file import ImageFile, read_file, read_header, write_file
from .header import Header
from .preview import MAX_PIXEL_COUNT, MutablePixelView, PixelView, PreviewImage, PreviewRgba

__version__ = "0.1.0"

__all__ = [
    "HeaderFormatError",
    "Header",
    "ImageFile",
    "MAX_PIXEL_COUNT",
    "MutablePixelView",
    "PixelView",
    "PreviewAllocationError",
    "PreviewBorrowError",
    "PreviewError",
    "PreviewImage",
    "PreviewOutOfRangeError",
    "PreviewOverflowError",
    "PreviewReleasedError",
    "PreviewRgba",
    "read_file",
    "read_header",
    "write_file",
]
