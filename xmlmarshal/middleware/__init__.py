"""Flask middleware: Prometheus metrics and XML error handlers."""
