from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Iterable, List

PIXEL_SIZE = 4


def _half(value: float) -> float:
    """Round a float to IEEE half precision."""
    try:
        return struct.unpack("<e", struct.pack("<e", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _narrow_u8(value: float) -> int:
    """Truncate toward zero and saturate to 0..255."""
    if math.isnan(value) or value <= 0:
        return 0
    if value >= 255:
        return 255
    return int(value)


@dataclass(frozen=True)
class PreviewRgba:
    """Gamma-encoded 8-bit RGBA preview pixel.

    Intensity is proportional to pow(x / 255, 2.2) for r, g and b.
    Alpha is linear: 0 is transparent, 255 is opaque.
    """

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"Channel '{name}' must be an int, got {type(value).__name__}")
            if not 0 <= value <= 255:
                raise ValueError(f"Channel '{name}' must be in 0..255, got {value}")

    @classmethod
    def from_u8(cls, r: int, g: int, b: int, a: int) -> "PreviewRgba":
        return cls(r, g, b, a)

    @classmethod
    def from_f16(cls, r: float, g: float, b: float, a: float) -> "PreviewRgba":
        """Build a pixel from half-float samples in [0, 1].

        Inputs are not validated; callers are expected to keep them in range.
        """
        return cls(
            _narrow_u8(_half(float(r)) * 255.0),
            _narrow_u8(_half(float(g)) * 255.0),
            _narrow_u8(_half(float(b)) * 255.0),
            _narrow_u8(_half(float(a)) * 255.0),
        )

    @classmethod
    def zero(cls) -> "PreviewRgba":
        return cls(0, 0, 0, 0)

    @classmethod
    def from_bytes(cls, data: bytes) -> "PreviewRgba":
        if len(data) != PIXEL_SIZE:
            raise ValueError(f"Pixel needs {PIXEL_SIZE} bytes, got {len(data)}")
        return cls(data[0], data[1], data[2], data[3])

    def to_bytes(self) -> bytes:
        return bytes((self.r, self.g, self.b, self.a))

    def as_tuple(self) -> tuple:
        return (self.r, self.g, self.b, self.a)


def pixels_to_bytes(pixels: Iterable[PreviewRgba]) -> bytes:
    """Pack pixels into interleaved RGBA bytes."""
    out = bytearray()
    for pixel in pixels:
        if not isinstance(pixel, PreviewRgba):
            raise TypeError(f"Expected PreviewRgba, got {type(pixel).__name__}")
        out += pixel.to_bytes()
    return bytes(out)


def pixels_from_bytes(data: bytes) -> List[PreviewRgba]:
    """Unpack interleaved RGBA bytes into pixels."""
    if len(data) % PIXEL_SIZE != 0:
        raise ValueError("Pixel data length must be a multiple of 4")
    return [
        PreviewRgba(data[i], data[i + 1], data[i + 2], data[i + 3])
        for i in range(0, len(data), PIXEL_SIZE)
    ]
