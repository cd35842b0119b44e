"""Request-scoped context for marshaled handlers.

Handlers declared with a fourth parameter receive a context object. The
context is created per request by ``WithContext``, a WSGI middleware that
stores it in the WSGI environ, and read back by ``get_context``.
"""
import logging
from typing import Any, Callable, Iterable, Optional

from werkzeug.wrappers import Request

CONTEXT_ENVIRON_KEY = "xmlmarshal.context"

logger = logging.getLogger(__name__)


class WithContext:
    """
    WSGI middleware attaching a fresh context object to every request.

    Usage:
        app.wsgi_app = WithContext(app.wsgi_app, RequestContext)
    """

    def __init__(self, wsgi_app: Callable, factory: Callable[[], Any]):
        """
        Initialize the middleware.

        Args:
            wsgi_app: Wrapped WSGI application
            factory: Zero-argument callable building a context per request
        """
        self.wsgi_app = wsgi_app
        self.factory = factory

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        environ[CONTEXT_ENVIRON_KEY] = self.factory()
        return self.wsgi_app(environ, start_response)


def get_context(request: Request) -> Optional[Any]:
    """
    Get the context attached to a request.

    Args:
        request: Incoming request

    Returns:
        The context object, or None when no WithContext middleware ran
    """
    context = request.environ.get(CONTEXT_ENVIRON_KEY)
    if context is None:
        logger.debug(f"No request context attached to {request.method} {request.path}")
    return context
