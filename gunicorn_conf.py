import os

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
# Admission locks are per process; across workers the opportunity row lock
# (SELECT ... FOR UPDATE on PostgreSQL) serializes signups.
workers = int(os.getenv("WEB_CONCURRENCY", 2))
worker_class = "uvicorn.workers.UvicornWorker"
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", 30))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", 5))

accesslog = "-"
errorlog = "-"
