"""
Gunicorn Configuration for Miles Ahead
Production WSGI server settings

    gunicorn -c deployment/gunicorn_config.py "app:create_app('production')"
"""
import multiprocessing
import os

# Server Socket
bind = os.environ.get('GUNICORN_BIND', '127.0.0.1:8000')
backlog = 2048

# Worker Processes
# One user and a small SQLite/Postgres database; a handful of workers is plenty
workers = int(os.environ.get('GUNICORN_WORKERS', min(multiprocessing.cpu_count() * 2 + 1, 4)))
worker_class = 'sync'
max_requests = 1000
max_requests_jitter = 50
# Price scraping can block a request for up to GAS_PRICE_TIMEOUT seconds
timeout = 60
keepalive = 5

# Logging
app_dir = os.environ.get('MILES_AHEAD_HOME', '/home/milesahead/app')
accesslog = os.path.join(app_dir, 'logs', 'gunicorn_access.log')
errorlog = os.path.join(app_dir, 'logs', 'gunicorn_error.log')
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process Naming
proc_name = 'miles-ahead'

# Server Mechanics
daemon = False
pidfile = os.path.join(app_dir, 'gunicorn.pid')
umask = 0o007

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190


def post_fork(server, worker):
    """Called after a worker has been forked"""
    server.log.info("Worker spawned (pid: %s)", worker.pid)


def when_ready(server):
    """Called when the server is ready"""
    server.log.info("Miles Ahead ready. Spawning workers")


def worker_abort(worker):
    """Called when a worker fails to boot or times out"""
    worker.log.info("worker received SIGABRT signal")
