"""Tests for the reaper Celery task."""

from contextlib import contextmanager

from app.models.chat import Chat
from app.tasks.reaper_task import sweep_ephemeral_chats_task


def test_task_sweeps_expired_chats(db, make_expired_chat_with_history, monkeypatch):
    make_expired_chat_with_history()

    @contextmanager
    def test_session():
        yield db

    monkeypatch.setattr("app.tasks.reaper_task.db_session", test_session)

    assert sweep_ephemeral_chats_task() == {"deleted_count": 1, "failed_count": 0}
    assert db.query(Chat).count() == 0
