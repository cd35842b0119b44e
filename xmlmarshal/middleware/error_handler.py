"""Error handling middleware with Sentry integration.

Errors raised by Flask itself (unknown routes, wrong methods, crashes outside
marshaled handlers) are rendered as the same XML error documents marshaled
handlers produce.
"""
import logging
from flask import Response
from werkzeug.exceptions import HTTPException, InternalServerError

from xmlmarshal.config.settings import Config
from xmlmarshal.marshaler import error_document
from xmlmarshal.utils.media_types import XML_MEDIA_TYPE

logger = logging.getLogger(__name__)


def _xml_error_response(err: BaseException, status: int, snake_case: bool) -> Response:
    return Response(error_document(err, snake_case), status=status, content_type=XML_MEDIA_TYPE)


def init_error_handlers(app) -> None:
    """
    Initialize error handlers for the application.

    Args:
        app: Flask application instance
    """
    sentry_dsn = app.config.get("SENTRY_DSN", Config.SENTRY_DSN)
    snake_case = app.config.get("SNAKE_CASE_ERRORS", Config.SNAKE_CASE_ERRORS)

    # Initialize Sentry if DSN is provided
    if sentry_dsn:
        try:
            import sentry_sdk
            from sentry_sdk.integrations.flask import FlaskIntegration

            sentry_sdk.init(
                dsn=sentry_dsn,
                integrations=[FlaskIntegration()],
                traces_sample_rate=0.1,
                environment=app.config.get("FLASK_ENV", "production"),
            )
            logger.info("Sentry error tracking initialized")
        except ImportError:
            logger.warning("Sentry SDK not installed, skipping Sentry initialization")

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Handle HTTP errors raised by routing."""
        return _xml_error_response(error, error.code or 500, snake_case)

    @app.errorhandler(Exception)
    def internal_error(error):
        """Handle unexpected errors."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return _xml_error_response(InternalServerError(), 500, snake_case)
