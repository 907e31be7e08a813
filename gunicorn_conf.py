import multiprocessing
import os

from task_tracker.config import settings

# Run with: gunicorn -c gunicorn_conf.py task_tracker.main:app

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8080")

# (2 x num_cores) + 1 unless WEB_CONCURRENCY says otherwise
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"

timeout = 120
keepalive = 5

accesslog = "-"
errorlog = "-"
loglevel = settings.LOG_LEVEL.lower()

name = "task_tracker_api"
reload = False
