"""Flask application factory serving the widget endpoints through XML marshalers."""
import logging
import sys
from flask import Flask

from xmlmarshal.config.settings import Config, MarshalerOptions, get_config
from xmlmarshal.context import WithContext
from xmlmarshal.marshaler import marshaled
from xmlmarshal.middleware.error_handler import init_error_handlers
from xmlmarshal.middleware.monitoring import register_metrics_middleware
from xmlmarshal.server.health import health
from xmlmarshal.server.widgets import RequestContext, create_widgets_blueprint


def create_app(config_class=None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_class: Optional configuration class (for testing)

    Returns:
        Configured Flask application
    """
    _logger = logging.getLogger(__name__)

    app = Flask(__name__)

    # Load configuration
    config = config_class or get_config()
    app.config.from_object(config)

    # Configure logging FIRST (needed for all subsequent operations)
    _configure_logging(config)

    try:
        config.validate()
    except ValueError as e:
        _logger.critical(f"Invalid configuration: {e}")
        raise

    options = MarshalerOptions.from_config(config)
    app.register_blueprint(create_widgets_blueprint(options))
    app.add_url_rule("/health", view_func=marshaled(health, options=options).as_view("health"), methods=["GET"])

    init_error_handlers(app)
    register_metrics_middleware(app)
    app.wsgi_app = WithContext(app.wsgi_app, RequestContext)

    _logger.info(f"App routes registered: {[str(rule) for rule in app.url_map.iter_rules()]}")
    return app


def _configure_logging(config: type[Config]) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=logging.INFO if not config.DEBUG else logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )
