from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..errors import HeaderFormatError
from ..preview import PreviewImage
from .attributes import Attribute, iter_attributes, make_attribute, validate_name
from .encoding import Compression, LineOrder, decode_value, encode_value

PREVIEW_ATTRIBUTE = "preview"
PREVIEW_TYPE = "preview"


class Header:
    """Ordered collection of named, typed attributes.

    Preview images inserted into the header are cloned, so the header owns
    its copy and releases it on close().
    """

    def __init__(self) -> None:
        self._attributes: Dict[str, Attribute] = {}

    @classmethod
    def from_dimensions(cls, width: int, height: int) -> "Header":
        if width < 1 or height < 1:
            raise ValueError("Header dimensions must be positive")
        header = cls()
        window = (0, 0, width - 1, height - 1)
        header.insert("displayWindow", "box2i", window)
        header.insert("dataWindow", "box2i", window)
        header.insert("pixelAspectRatio", "float", 1.0)
        header.insert("screenWindowCenter", "v2f", (0.0, 0.0))
        header.insert("screenWindowWidth", "float", 1.0)
        header.insert("lineOrder", "lineOrder", LineOrder.INCREASING_Y)
        header.insert("compression", "compression", Compression.ZIP)
        return header

    # -- generic attributes ------------------------------------------------

    def insert(self, name: str, type_name: str, value: Any) -> None:
        validate_name(name)
        if type_name == PREVIEW_TYPE:
            if not isinstance(value, PreviewImage):
                raise TypeError(f"Attribute '{name}' of type preview needs a PreviewImage")
            value = value.clone()
        else:
            encode_value(type_name, value)
        old = self._attributes.get(name)
        self._attributes[name] = Attribute(type_name, value)
        if old is not None:
            self._close_value(old)

    def attribute(self, name: str) -> Attribute:
        return self._attributes[name]

    def __getitem__(self, name: str) -> Any:
        return self._attributes[name].value

    def __setitem__(self, name: str, value: Any) -> None:
        """Replace a value, keeping the attribute's type.

        ``preview`` may always be set and needs a PreviewImage; any other
        attribute must already exist (use insert() to add a typed one).
        """
        if name == PREVIEW_ATTRIBUTE:
            self.insert(name, PREVIEW_TYPE, value)
            return
        self.insert(name, self._attributes[name].type_name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def items(self) -> List[Tuple[str, Attribute]]:
        return list(self._attributes.items())

    def erase(self, name: str) -> None:
        attribute = self._attributes.pop(name, None)
        if attribute is not None:
            self._close_value(attribute)

    @staticmethod
    def _close_value(attribute: Attribute) -> None:
        if isinstance(attribute.value, PreviewImage):
            attribute.value.close()

    @property
    def data_window(self) -> Optional[Tuple[int, int, int, int]]:
        attribute = self._attributes.get("dataWindow")
        return attribute.value if attribute else None

    @property
    def display_window(self) -> Optional[Tuple[int, int, int, int]]:
        attribute = self._attributes.get("displayWindow")
        return attribute.value if attribute else None

    # -- preview -----------------------------------------------------------

    def has_preview_image(self) -> bool:
        attribute = self._attributes.get(PREVIEW_ATTRIBUTE)
        return attribute is not None and attribute.type_name == PREVIEW_TYPE

    def preview_image(self) -> Optional[PreviewImage]:
        """Return the header-owned preview, or None if there is none."""
        if not self.has_preview_image():
            return None
        return self._attributes[PREVIEW_ATTRIBUTE].value

    def set_preview_image(self, image: PreviewImage) -> None:
        """Store a copy of ``image`` as the header's preview."""
        self.insert(PREVIEW_ATTRIBUTE, PREVIEW_TYPE, image)

    # -- lifecycle ---------------------------------------------------------

    def copy(self) -> "Header":
        header = Header()
        for name, attribute in self._attributes.items():
            header.insert(name, attribute.type_name, attribute.value)
        return header

    def close(self) -> None:
        """Release stored previews and empty the header."""
        for attribute in self._attributes.values():
            self._close_value(attribute)
        self._attributes.clear()

    def __enter__(self) -> "Header":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- serialization -----------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialize every attribute followed by the terminating NUL byte."""
        out = bytearray()
        for name, attribute in self._attributes.items():
            payload = encode_value(attribute.type_name, attribute.value)
            out += make_attribute(name, attribute.type_name, payload)
        out += b"\x00"
        return bytes(out)

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> Tuple["Header", int]:
        """Parse attributes starting at ``offset``.

        Returns the header and the offset just past the terminating NUL byte.
        """
        header = cls()
        end = offset
        try:
            for name, type_name, payload, end in iter_attributes(data, offset):
                if name in header._attributes:
                    raise HeaderFormatError(f"Duplicate attribute '{name}'")
                header._attributes[name] = Attribute(type_name, decode_value(type_name, payload))
        except HeaderFormatError:
            header.close()
            raise
        return header, end + 1

    def __repr__(self) -> str:
        names = ", ".join(self._attributes)
        return f"<Header [{names}]>"
