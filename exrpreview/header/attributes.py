from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Iterator, Tuple

from ..errors import HeaderFormatError

MAX_NAME_LENGTH = 255

_SIZE = struct.Struct("<i")


@dataclass(frozen=True)
class Attribute:
    """A typed header value. ``value`` is the decoded Python object."""

    type_name: str
    value: Any


def _encode_name(kind: str, name: str) -> bytes:
    raw = name.encode("utf-8")
    if not raw:
        raise ValueError(f"Attribute {kind} must not be empty")
    if len(raw) > MAX_NAME_LENGTH:
        raise ValueError(f"Attribute {kind} '{name}' is longer than {MAX_NAME_LENGTH} bytes")
    if b"\x00" in raw:
        raise ValueError(f"Attribute {kind} '{name}' contains a NUL byte")
    return raw


def validate_name(name: str) -> str:
    _encode_name("name", name)
    return name


def make_attribute(name: str, type_name: str, payload: bytes) -> bytes:
    """Frame an encoded value as ``name\\0 type\\0 size value``."""
    return (
        _encode_name("name", name)
        + b"\x00"
        + _encode_name("type", type_name)
        + b"\x00"
        + _SIZE.pack(len(payload))
        + payload
    )


def _read_cstring(data: bytes, offset: int, what: str) -> Tuple[str, int]:
    end = data.find(b"\x00", offset, offset + MAX_NAME_LENGTH + 1)
    if end < 0:
        raise HeaderFormatError(f"Unterminated attribute {what} at offset {offset}")
    if end == offset:
        raise HeaderFormatError(f"Empty attribute {what} at offset {offset}")
    try:
        return data[offset:end].decode("utf-8"), end + 1
    except UnicodeDecodeError as exc:
        raise HeaderFormatError(f"Attribute {what} at offset {offset} is not UTF-8") from exc


def read_attribute(data: bytes, offset: int) -> Tuple[str, str, bytes, int]:
    """Read one attribute record; returns (name, type, payload, next offset)."""
    name, offset = _read_cstring(data, offset, "name")
    type_name, offset = _read_cstring(data, offset, "type")
    if offset + _SIZE.size > len(data):
        raise HeaderFormatError(f"Truncated size of attribute '{name}'")
    (size,) = _SIZE.unpack_from(data, offset)
    offset += _SIZE.size
    if size < 0:
        raise HeaderFormatError(f"Negative size {size} for attribute '{name}'")
    if offset + size > len(data):
        raise HeaderFormatError(f"Truncated value of attribute '{name}'")
    return name, type_name, bytes(data[offset : offset + size]), offset + size


def iter_attributes(data: bytes, offset: int = 0) -> Iterator[Tuple[str, str, bytes, int]]:
    """Yield attribute records until the terminating NUL byte."""
    while True:
        if offset >= len(data):
            raise HeaderFormatError("Missing header terminator")
        if data[offset] == 0:
            return
        record = read_attribute(data, offset)
        yield record
        offset = record[3]
