"""Celery application configuration."""

from celery import Celery
from celery.schedules import crontab

from src.config import get_settings

settings = get_settings()

app = Celery(
    "cold_dm_tracker",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.reminders"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # 4 minutes soft limit
)

app.conf.beat_schedule = {
    "send-daily-reminders": {
        "task": "src.tasks.reminders.send_daily_reminders",
        "schedule": crontab(minute=0),
        "options": {"expires": 55 * 60},
    },
}
