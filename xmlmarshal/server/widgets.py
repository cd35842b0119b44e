"""Widget endpoints served through XML marshalers."""
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint
from werkzeug.datastructures import Headers
from werkzeug.exceptions import BadRequest, NotFound

from xmlmarshal.config.settings import MarshalerOptions
from xmlmarshal.domain.descriptor import URL
from xmlmarshal.marshaler import marshaled

_logger = logging.getLogger(__name__)


@dataclass
class Widget:
    """A named widget with free-form tags."""

    id: str = ""
    name: str = ""
    price: float = 0.0
    tags: List[str] = field(default_factory=list)


@dataclass
class WidgetList:
    """Collection of widgets."""

    widget: List[Widget] = field(default_factory=list)


@dataclass
class RequestContext:
    """Per-request values attached by WithContext."""

    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)


class WidgetStore:
    """In-memory widget storage."""

    def __init__(self):
        self._widgets: Dict[str, Widget] = {}
        self._lock = threading.Lock()

    def get(self, widget_id: str) -> Optional[Widget]:
        with self._lock:
            return self._widgets.get(widget_id)

    def all(self) -> List[Widget]:
        with self._lock:
            return list(self._widgets.values())

    def put(self, widget: Widget) -> None:
        with self._lock:
            self._widgets[widget.id] = widget

    def delete(self, widget_id: str) -> Optional[Widget]:
        with self._lock:
            return self._widgets.pop(widget_id, None)

    def clear(self) -> None:
        with self._lock:
            self._widgets.clear()


store = WidgetStore()


def _widget_id(url: URL) -> str:
    return url.path.rstrip("/").rsplit("/", 1)[-1]


def list_widgets(url: URL, headers: Headers, rq: Any) -> Tuple[int, Optional[Headers], WidgetList, Optional[Exception]]:
    return 200, None, WidgetList(widget=store.all()), None


def get_widget(url: URL, headers: Headers, rq: Any) -> Tuple[int, Optional[Headers], Optional[Widget], Optional[Exception]]:
    widget = store.get(_widget_id(url))
    if widget is None:
        return 0, None, None, NotFound(f"widget {_widget_id(url)} does not exist")
    return 200, None, widget, None


def create_widget(
    url: URL, headers: Headers, rq: Widget, context: RequestContext
) -> Tuple[int, Optional[Headers], Widget, Optional[Exception]]:
    """Create a widget; the id is assigned by the server."""
    if not rq.name:
        return 0, None, None, BadRequest("widget name is required")
    rq.id = uuid.uuid4().hex
    store.put(rq)
    _logger.info(f"Created widget {rq.id} (request {context.request_id if context else 'unknown'})")
    return 201, Headers({"Location": f"{url.path.rstrip('/')}/{rq.id}"}), rq, None


def update_widget(url: URL, headers: Headers, rq: Widget) -> Tuple[int, Optional[Headers], Widget, Optional[Exception]]:
    widget_id = _widget_id(url)
    if store.get(widget_id) is None:
        return 0, None, None, NotFound(f"widget {widget_id} does not exist")
    rq.id = widget_id
    store.put(rq)
    return 200, None, rq, None


def delete_widget(url: URL, headers: Headers, rq: Any) -> Tuple[int, Optional[Headers], None, Optional[Exception]]:
    widget_id = _widget_id(url)
    if store.delete(widget_id) is None:
        return 0, None, None, NotFound(f"widget {widget_id} does not exist")
    return 204, None, None, None


def create_widgets_blueprint(options: Optional[MarshalerOptions] = None) -> Blueprint:
    """
    Create the blueprint serving the widget endpoints.

    Args:
        options: Options shared by the widget marshalers

    Returns:
        Blueprint with the widget routes
    """
    blueprint = Blueprint("widgets", __name__)
    routes = [
        ("/widgets", list_widgets, "GET"),
        ("/widgets", create_widget, "POST"),
        ("/widgets/<widget_id>", get_widget, "GET"),
        ("/widgets/<widget_id>", update_widget, "PUT"),
        ("/widgets/<widget_id>", delete_widget, "DELETE"),
    ]
    for rule, handler, method in routes:
        view = marshaled(handler, options=options).as_view(handler.__name__)
        blueprint.add_url_rule(rule, view_func=view, methods=[method])
    return blueprint
