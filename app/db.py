"""Database engine, session factory and the declarative Base."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import get_settings

Base = declarative_base()


class DatabaseManager:
    """Lazily builds the engine so importing the app never opens a connection."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self._database_url = database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            settings = get_settings()
            url = self._database_url or settings.database_url
            if url.startswith("sqlite"):
                self._engine = create_engine(
                    url, connect_args={"check_same_thread": False}
                )
            else:
                self._engine = create_engine(
                    url,
                    pool_size=settings.database_pool_size,
                    max_overflow=settings.database_max_overflow,
                    pool_pre_ping=True,
                )
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine, autocommit=False, autoflush=False
            )
        return self._session_factory

    @contextmanager
    def db_session(self) -> Generator[Session, None, None]:
        """Session scope for workers and tasks. Rolls back on error, always closes."""
        session = self.session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    db = db_manager.session_factory()
    try:
        yield db
    finally:
        db.close()
