"""
Gunicorn configuration for the activity tracker API.

Env vars that override defaults:
  PORT     TCP port to bind (default: 8000)
  WORKERS  number of worker processes (default: 2)

With SCHEDULER_ENABLED=true every worker starts its own daily generation
ticker. Run a single worker in that mode, or leave the scheduler off and
call `python -m app.cli generate` from cron instead.
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

_scheduler_on = os.environ.get("SCHEDULER_ENABLED", "false").lower() in ("1", "true", "yes")
workers = 1 if _scheduler_on else int(os.environ.get("WORKERS", "2"))

# Uvicorn's ASGI event loop inside Gunicorn's process manager
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Generation for many users runs inside a request; leave headroom
timeout = 120

# stdout only
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sus'

graceful_timeout = 30
