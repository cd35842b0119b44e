"""XML codec used by the marshaler."""
from xmlmarshal.codec.xml_codec import (
    decode,
    decode_stream,
    encode,
    is_bindable,
    zero_value,
)

__all__ = [
    "decode",
    "decode_stream",
    "encode",
    "is_bindable",
    "zero_value",
]
