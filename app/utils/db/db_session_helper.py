"""Session scope for code running outside a request (Celery tasks, scripts)."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from sqlalchemy.orm import Session

from app.db import db_manager


@contextmanager
def db_session() -> Generator[Session, None, None]:
    with db_manager.db_session() as session:
        yield session
