"""Celery application configuration and beat schedule."""

from celery import Celery
from celery.schedules import crontab

from affinity.config import get_settings

settings = get_settings()

celery_app = Celery(
    "affinity",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "affinity.tasks.vector_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    task_track_started=True,
    task_time_limit=1800,
    task_soft_time_limit=1740,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

celery_app.conf.beat_schedule = {
    "rebuild-interest-vectors": {
        "task": "affinity.tasks.vector_tasks.rebuild_interest_vectors",
        "schedule": crontab(minute=0, hour=4),
    },
}
