"""Celery application instance.

Start the worker::

    celery -A hospital_admin.app.workers.celery_app worker --loglevel=info
    celery -A hospital_admin.app.workers.celery_app beat --loglevel=info
"""

from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from hospital_admin.app.core.config import settings

celery = Celery(
    "hospital_admin",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["hospital_admin.app.workers.tasks.reminders"],
)

celery.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone=settings.CELERY_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

# Beat schedule: daily digests before the pharmacy opens
celery.conf.beat_schedule = {
    "payment-reminder-digest-daily": {
        "task": "hospital_admin.app.workers.tasks.reminders.send_payment_reminder_digest",
        "schedule": crontab(hour=7, minute=0),
    },
    "expiry-digest-daily": {
        "task": "hospital_admin.app.workers.tasks.reminders.send_expiry_digest",
        "schedule": crontab(hour=7, minute=15),
    },
}
