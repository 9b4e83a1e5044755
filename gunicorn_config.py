"""
Gunicorn config: gunicorn -c gunicorn_config.py app:app
"""
import os

bind = "0.0.0.0:{}".format(os.environ.get("PORT", "5000"))
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))
threads = int(os.environ.get("GUNICORN_THREADS", "2"))
timeout = 120
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
