"""Utilities for negotiating XML media types."""
from typing import Optional

XML_MEDIA_TYPE = "application/xml"
TEXT_MEDIA_TYPE = "text/plain"
WILDCARD_MEDIA_RANGE = "*/*"


def accepts_xml(accept: Optional[str]) -> bool:
    """
    Check if an Accept header allows an XML response.

    An absent or empty header accepts anything.

    Args:
        accept: Raw Accept header value

    Returns:
        True if XML output is acceptable, False otherwise
    """
    if not accept:
        return True
    return WILDCARD_MEDIA_RANGE in accept or XML_MEDIA_TYPE in accept


def is_xml_content_type(content_type: Optional[str]) -> bool:
    """
    Check if a Content-Type header declares an XML body.

    Parameters such as ``; charset=utf-8`` are ignored.

    Args:
        content_type: Raw Content-Type header value

    Returns:
        True if the body is declared as XML, False otherwise
    """
    return bool(content_type) and content_type.startswith(XML_MEDIA_TYPE)
