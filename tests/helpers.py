"""Helpers shared by the marshaler tests."""
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List, Optional

from werkzeug.test import EnvironBuilder


@dataclass
class Widget:
    """Request and response type used across tests."""

    name: str = ""
    price: float = 0.0
    tags: List[str] = field(default_factory=list)
    note: Optional[str] = None


def make_request(method="GET", path="/widgets", data=None, content_type=None, headers=None):
    """Build a Werkzeug request."""
    builder = EnvironBuilder(
        method=method,
        path=path,
        data=data,
        content_type=content_type,
        headers=headers,
    )
    return builder.get_request()


def parse_error(response):
    """Return ``(error, description)`` from a uniform error document."""
    root = ET.fromstring(response.get_data())
    assert root.tag == "error"
    return root.findtext("error"), root.findtext("description")
