# cafe/celery_worker.py
from celery import Celery

from cafe.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "cafe",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

#tasks live outside the worker module, register them explicitly
celery_app.conf.imports = (
    "cafe.services.notification_service",
)

celery_app.conf.timezone = "UTC"
