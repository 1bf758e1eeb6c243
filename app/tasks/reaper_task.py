"""Celery task for the ephemeral chat reaper."""

from __future__ import annotations

from app.commands.sweep_ephemeral_chats_command import SweepEphemeralChatsCommand
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.utils.db.db_session_helper import db_session

logger = get_logger("reaper")


@celery_app.task(name="app.tasks.reaper_task.sweep_ephemeral_chats_task")
def sweep_ephemeral_chats_task() -> dict:
    """Delete expired ephemeral chats. Scheduled by beat every reaper_interval_minutes."""
    with db_session() as db:
        result = SweepEphemeralChatsCommand(db).execute()
    return {
        "deleted_count": result.deleted_count,
        "failed_count": result.failed_count,
    }
