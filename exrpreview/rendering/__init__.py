from .converter import (
    DEFAULT_PREVIEW_HEIGHT,
    DEFAULT_PREVIEW_WIDTH,
    PreviewSettings,
    load_image,
    preview_from_image,
    preview_from_linear,
    preview_to_image,
)

__all__ = [
    "DEFAULT_PREVIEW_HEIGHT",
    "DEFAULT_PREVIEW_WIDTH",
    "PreviewSettings",
    "load_image",
    "preview_from_image",
    "preview_from_linear",
    "preview_to_image",
]
