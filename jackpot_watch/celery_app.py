from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from .settings.config import settings


celery_app = Celery(
    "jackpot_watch",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.timezone = settings.check_timezone
celery_app.conf.beat_schedule = {
    "check-jackpots-daily": {
        "task": "jackpot_watch.services.tasks.task_check_jackpots",
        "schedule": crontab(
            hour=settings.check_schedule_hour,
            minute=settings.check_schedule_minute,
        ),
    },
}

celery_app.autodiscover_tasks(["jackpot_watch.services"])
