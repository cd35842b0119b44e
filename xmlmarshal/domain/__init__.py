"""Domain types: the error vocabulary and handler descriptors.

Descriptors live in ``xmlmarshal.domain.descriptor``; they depend on the codec,
which itself depends on the errors exported here.
"""

from xmlmarshal.domain.errors import (
    MarshalerError,
    DecodeError,
    EncodeError,
    NamedError,
    HTTPEquivError,
    error_description,
    error_name,
    http_status,
)

__all__ = [
    "MarshalerError",
    "DecodeError",
    "EncodeError",
    "NamedError",
    "HTTPEquivError",
    "error_description",
    "error_name",
    "http_status",
]
