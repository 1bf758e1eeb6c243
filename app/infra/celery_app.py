"""Celery application: Redis broker and the reaper beat schedule."""

from __future__ import annotations

from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "polyglot_chat",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks.reaper_task"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "sweep-ephemeral-chats": {
            "task": "app.tasks.reaper_task.sweep_ephemeral_chats_task",
            "schedule": settings.reaper_interval_minutes * 60.0,
        },
    },
)
