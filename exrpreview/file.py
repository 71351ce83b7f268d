from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass, field
from typing import Union

import crc8

from .errors import HeaderFormatError
from .header import Header

logger = logging.getLogger(__name__)

MAGIC = bytes([0x76, 0x2F, 0x31, 0x01])
VERSION = 2

_VERSION = struct.Struct("<I")
_LENGTH = struct.Struct("<Q")

PathLike = Union[str, "os.PathLike[str]"]


def crc8_value(data: bytes) -> int:
    """Return CRC8 checksum byte for the header bytes."""
    hasher = crc8.crc8()
    hasher.update(data)
    return hasher.digest()[0]


@dataclass
class ImageFile:
    """A parsed container: its header and the opaque payload that follows it."""

    header: Header
    payload: bytes = field(default=b"", repr=False)

    def close(self) -> None:
        self.header.close()

    def __enter__(self) -> "ImageFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def build_file(header: Header, payload: bytes = b"") -> bytes:
    """Serialize a header and payload into container bytes."""
    head = bytearray()
    head += MAGIC
    head += _VERSION.pack(VERSION)
    head += header.to_bytes()
    head.append(crc8_value(bytes(head)))
    return bytes(head) + _LENGTH.pack(len(payload)) + bytes(payload)


def parse_file(data: bytes) -> ImageFile:
    """Parse container bytes produced by build_file()."""
    if len(data) < len(MAGIC) + _VERSION.size or data[: len(MAGIC)] != MAGIC:
        raise HeaderFormatError("Not a preview container (bad magic number)")
    (version,) = _VERSION.unpack_from(data, len(MAGIC))
    if version != VERSION:
        raise HeaderFormatError(f"Unsupported container version {version}")
    header, offset = Header.from_bytes(data, len(MAGIC) + _VERSION.size)
    try:
        if offset + 1 + _LENGTH.size > len(data):
            raise HeaderFormatError("Truncated container after header")
        expected = crc8_value(data[:offset])
        if data[offset] != expected:
            raise HeaderFormatError(
                f"Header checksum mismatch (stored 0x{data[offset]:02x}, computed 0x{expected:02x})"
            )
        offset += 1
        (length,) = _LENGTH.unpack_from(data, offset)
        offset += _LENGTH.size
        payload = data[offset:]
        if len(payload) != length:
            raise HeaderFormatError(f"Payload needs {length} bytes, got {len(payload)}")
    except HeaderFormatError:
        header.close()
        raise
    return ImageFile(header, bytes(payload))


def write_file(path: PathLike, header: Header, payload: bytes = b"") -> None:
    data = build_file(header, payload)
    with open(path, "wb") as handle:
        handle.write(data)
    logger.info("Wrote %s (%d attributes, %d payload bytes)", os.fspath(path), len(header), len(payload))


def read_file(path: PathLike) -> ImageFile:
    with open(path, "rb") as handle:
        data = handle.read()
    image_file = parse_file(data)
    logger.info(
        "Read %s (%d attributes, preview: %s)",
        os.fspath(path),
        len(image_file.header),
        "yes" if image_file.header.has_preview_image() else "no",
    )
    return image_file


def read_header(path: PathLike) -> Header:
    return read_file(path).header
