from .image import PreviewImage
from .storage import MAX_PIXEL_COUNT
from .types import PIXEL_SIZE, PreviewRgba, pixels_from_bytes, pixels_to_bytes
from .view import MutablePixelView, PixelView

__all__ = [
    "MAX_PIXEL_COUNT",
    "MutablePixelView",
    "PIXEL_SIZE",
    "PixelView",
    "PreviewImage",
    "PreviewRgba",
    "pixels_from_bytes",
    "pixels_to_bytes",
]
