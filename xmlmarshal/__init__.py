"""Typed XML request handlers for Flask and Werkzeug.

``marshaled`` wraps a handler function into an ``XMLMarshaler`` that
negotiates, decodes, invokes and encodes::

    def get_widget(url: URL, headers: Headers, rq: Any) -> Tuple[int, Optional[Headers], Widget, Optional[Exception]]:
        ...

    app.add_url_rule("/widgets/<id>", view_func=marshaled(get_widget).as_view())
"""

from xmlmarshal.config.settings import MarshalerOptions
from xmlmarshal.context import WithContext, get_context
from xmlmarshal.domain.descriptor import URL, HandlerDescriptor
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
from xmlmarshal.marshaler import XMLMarshaler, marshaled, error_document

__all__ = [
    "marshaled",
    "XMLMarshaler",
    "error_document",
    "MarshalerOptions",
    "HandlerDescriptor",
    "URL",
    "WithContext",
    "get_context",
    "MarshalerError",
    "DecodeError",
    "EncodeError",
    "NamedError",
    "HTTPEquivError",
    "error_description",
    "error_name",
    "http_status",
]
