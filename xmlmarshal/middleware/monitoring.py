"""Monitoring and metrics middleware using Prometheus."""
import logging
from prometheus_client import Counter, Histogram, make_wsgi_app
from werkzeug.middleware.dispatcher import DispatcherMiddleware

from xmlmarshal.config.settings import Config

logger = logging.getLogger(__name__)

# Prometheus metrics
marshaled_requests_total = Counter(
    'xmlmarshal_requests_total',
    'Total number of requests served by XML marshalers',
    ['method', 'status']
)

marshaled_request_duration = Histogram(
    'xmlmarshal_request_duration_seconds',
    'Time spent serving requests through XML marshalers',
    ['method'],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0]
)

decode_failures_total = Counter(
    'xmlmarshal_decode_failures_total',
    'Total number of request bodies that could not be decoded',
    ['reason']
)


def register_metrics_middleware(app) -> None:
    """
    Register Prometheus metrics middleware.

    Args:
        app: Flask application instance
    """
    if not app.config.get("ENABLE_METRICS", Config.ENABLE_METRICS):
        return

    # Wrap app with Prometheus WSGI middleware
    app.wsgi_app = DispatcherMiddleware(app.wsgi_app, {
        '/metrics': make_wsgi_app()
    })

    logger.info("Prometheus metrics enabled at /metrics")


def track_marshaled_request(method: str, status: int, duration: float) -> None:
    """
    Track a request served by a marshaler.

    Args:
        method: HTTP method
        status: Response status code
        duration: Seconds spent serving the request
    """
    try:
        marshaled_requests_total.labels(method=method, status=status).inc()
        marshaled_request_duration.labels(method=method).observe(duration)
    except Exception as e:
        logger.warning(f"Failed to track request metrics: {e}")


def track_decode_failure(reason: str) -> None:
    """
    Track a request body that was rejected before reaching the handler.

    Args:
        reason: ``content_type`` or ``malformed``
    """
    try:
        decode_failures_total.labels(reason=reason).inc()
    except Exception as e:
        logger.warning(f"Failed to track decode failure: {e}")
