from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageOps

from ..preview import PreviewImage, PreviewRgba

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_WIDTH = 128
DEFAULT_PREVIEW_HEIGHT = 128

LinearSample = Tuple[float, float, float, float]


@dataclass
class PreviewSettings:
    max_width: int = DEFAULT_PREVIEW_WIDTH
    max_height: int = DEFAULT_PREVIEW_HEIGHT
    resample: int = Image.LANCZOS


def load_image(path: str) -> Image.Image:
    with Image.open(path) as img:
        img = ImageOps.exif_transpose(img)
        return img.copy()


def _normalize_image(img: Image.Image) -> Image.Image:
    if img.mode != "RGBA":
        return img.convert("RGBA")
    return img


def _fit_size(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    if width <= max_width and height <= max_height:
        return width, height
    ratio = min(max_width / float(width), max_height / float(height))
    return max(1, int(width * ratio)), max(1, int(height * ratio))


def preview_from_image(img: Image.Image, settings: Optional[PreviewSettings] = None) -> PreviewImage:
    """Build a preview that fits within the configured size, keeping aspect ratio."""
    settings = settings or PreviewSettings()
    if settings.max_width < 1 or settings.max_height < 1:
        raise ValueError("Preview size limits must be positive")
    img = _normalize_image(img)
    size = _fit_size(img.width, img.height, settings.max_width, settings.max_height)
    if size != img.size:
        logger.debug("Resizing %dx%d source to %dx%d preview", img.width, img.height, *size)
        img = img.resize(size, settings.resample)
    return PreviewImage.from_bytes(img.width, img.height, img.tobytes())


def preview_to_image(preview: PreviewImage) -> Image.Image:
    if preview.width == 0 or preview.height == 0:
        raise ValueError("Cannot convert an empty preview to an image")
    return Image.frombytes("RGBA", (preview.width, preview.height), preview.pixels().tobytes())


def preview_from_linear(width: int, height: int, samples: Sequence[LinearSample]) -> PreviewImage:
    """Build a preview from row-major linear (r, g, b, a) samples in [0, 1]."""
    if len(samples) != width * height:
        raise ValueError(f"Expected {width * height} samples, got {len(samples)}")
    preview = PreviewImage.with_dimensions(width, height)
    with preview.mut_pixels() as pixels:
        pixels.update(PreviewRgba.from_f16(r, g, b, a) for r, g, b, a in samples)
    return preview
