from .attributes import Attribute, iter_attributes, make_attribute, read_attribute
from .encoding import Compression, LineOrder, decode_preview, decode_value, encode_preview, encode_value
from .header import PREVIEW_ATTRIBUTE, Header

__all__ = [
    "Attribute",
    "Compression",
    "Header",
    "LineOrder",
    "PREVIEW_ATTRIBUTE",
    "decode_preview",
    "decode_value",
    "encode_preview",
    "encode_value",
    "iter_attributes",
    "make_attribute",
    "read_attribute",
]
