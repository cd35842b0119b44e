"""Health check endpoint."""
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from werkzeug.datastructures import Headers

from xmlmarshal.domain.descriptor import URL


@dataclass
class HealthStatus:
    """Health check document."""

    __xml_name__ = "health"

    status: str
    service: str


def health(url: URL, headers: Headers, rq: Any) -> Tuple[int, Optional[Headers], HealthStatus, Optional[Exception]]:
    """Basic health check."""
    return 200, Headers({"Cache-Control": "no-store"}), HealthStatus(status="healthy", service="xmlmarshal"), None
