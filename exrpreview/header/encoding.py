from __future__ import annotations

import enum
import struct
from typing import Any, Callable, Dict, Tuple

from ..errors import HeaderFormatError, PreviewError
from ..preview import PIXEL_SIZE, PreviewImage

_INT = struct.Struct("<i")
_FLOAT = struct.Struct("<f")
_BOX2I = struct.Struct("<4i")
_V2F = struct.Struct("<2f")
_PREVIEW_DIMS = struct.Struct("<II")


class Compression(enum.IntEnum):
    NO = 0
    RLE = 1
    ZIPS = 2
    ZIP = 3
    PIZ = 4
    PXR24 = 5
    B44 = 6
    B44A = 7
    DWAA = 8
    DWAB = 9


class LineOrder(enum.IntEnum):
    INCREASING_Y = 0
    DECREASING_Y = 1
    RANDOM_Y = 2


def _expect_size(type_name: str, payload: bytes, size: int) -> None:
    if len(payload) != size:
        raise HeaderFormatError(f"'{type_name}' value needs {size} bytes, got {len(payload)}")


def encode_preview(image: PreviewImage) -> bytes:
    """Encode a preview as width, height and interleaved RGBA pixels."""
    return _PREVIEW_DIMS.pack(image.width, image.height) + image.pixels().tobytes()


def decode_preview(payload: bytes) -> PreviewImage:
    if len(payload) < _PREVIEW_DIMS.size:
        raise HeaderFormatError("Truncated preview dimensions")
    width, height = _PREVIEW_DIMS.unpack_from(payload)
    data = payload[_PREVIEW_DIMS.size :]
    if len(data) != width * height * PIXEL_SIZE:
        raise HeaderFormatError(
            f"Preview {width}x{height} needs {width * height * PIXEL_SIZE} bytes, got {len(data)}"
        )
    try:
        return PreviewImage.from_bytes(width, height, data)
    except PreviewError as exc:
        raise HeaderFormatError(f"Cannot build {width}x{height} preview: {exc}") from exc


def encode_int(value: int) -> bytes:
    return _INT.pack(value)


def decode_int(payload: bytes) -> int:
    _expect_size("int", payload, _INT.size)
    return _INT.unpack(payload)[0]


def encode_float(value: float) -> bytes:
    return _FLOAT.pack(value)


def decode_float(payload: bytes) -> float:
    _expect_size("float", payload, _FLOAT.size)
    return _FLOAT.unpack(payload)[0]


def encode_string(value: str) -> bytes:
    return value.encode("utf-8")


def decode_string(payload: bytes) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HeaderFormatError("'string' value is not UTF-8") from exc


def encode_box2i(value: Tuple[int, int, int, int]) -> bytes:
    return _BOX2I.pack(*value)


def decode_box2i(payload: bytes) -> Tuple[int, int, int, int]:
    _expect_size("box2i", payload, _BOX2I.size)
    return _BOX2I.unpack(payload)


def encode_v2f(value: Tuple[float, float]) -> bytes:
    return _V2F.pack(*value)


def decode_v2f(payload: bytes) -> Tuple[float, float]:
    _expect_size("v2f", payload, _V2F.size)
    return _V2F.unpack(payload)


def _enum_codec(enum_type: type, type_name: str) -> Tuple[Callable[[Any], bytes], Callable[[bytes], Any]]:
    def encode(value: int) -> bytes:
        return bytes([enum_type(value)])

    def decode(payload: bytes) -> Any:
        _expect_size(type_name, payload, 1)
        try:
            return enum_type(payload[0])
        except ValueError as exc:
            raise HeaderFormatError(f"Unknown {type_name} value {payload[0]}") from exc

    return encode, decode


CODECS: Dict[str, Tuple[Callable[[Any], bytes], Callable[[bytes], Any]]] = {
    "preview": (encode_preview, decode_preview),
    "int": (encode_int, decode_int),
    "float": (encode_float, decode_float),
    "string": (encode_string, decode_string),
    "box2i": (encode_box2i, decode_box2i),
    "v2f": (encode_v2f, decode_v2f),
    "compression": _enum_codec(Compression, "compression"),
    "lineOrder": _enum_codec(LineOrder, "lineOrder"),
}


def encode_value(type_name: str, value: Any) -> bytes:
    """Encode a value; unknown types must already be raw bytes."""
    codec = CODECS.get(type_name)
    if codec is None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"Value of unknown attribute type '{type_name}' must be bytes")
        return bytes(value)
    return codec[0](value)


def decode_value(type_name: str, payload: bytes) -> Any:
    """Decode a value; unknown types are kept as raw bytes."""
    codec = CODECS.get(type_name)
    if codec is None:
        return bytes(payload)
    return codec[1](payload)
