"""Gunicorn configuration for serving the XML marshaler demo application."""
import multiprocessing
import os

# Application factory
wsgi_app = "xmlmarshal.server:create_app()"

# Server socket
port = os.getenv("PORT", "8000")
bind = f"0.0.0.0:{port}"
backlog = 2048

# Worker processes
workers_env = os.getenv("GUNICORN_WORKERS")
if workers_env:
    workers = int(workers_env)
else:
    workers = min(max(multiprocessing.cpu_count(), 2), 8)

# Marshalers hold no shared state; each request runs on its worker's thread
worker_class = "sync"
timeout = 30
keepalive = 5
graceful_timeout = 30

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'
capture_output = True

# Process naming
proc_name = "xmlmarshal"
