import os

os.environ["ENV"] = "test"
os.environ["TEST_DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-auth-secret"
os.environ["GUEST_CREDENTIAL_SECRET"] = "test-guest-credential-secret"
os.environ.pop("MAINTENANCE_TOKEN", None)
os.environ.pop("GUEST_CHAT_REUSE_ENABLED", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base, get_db
import app.models  # noqa: F401
from app.infra.redis_client import get_redis_client
from app.main import create_app
from app.realtime.relay import get_change_relay
from app.workers.translator import get_translation_provider

pytest_plugins = [
    "tests.fixtures.profile_fixtures",
    "tests.fixtures.chat_fixtures",
    "tests.fixtures.guest_fixtures",
    "tests.fixtures.translation_fixtures",
    "tests.fixtures.auth_fixtures",
    "tests.fixtures.redis_fixtures",
]

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db, fake_provider, fake_redis, change_relay):
    """Client with db, translation provider, redis and the relay overridden."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_translation_provider] = lambda: fake_provider
    app.dependency_overrides[get_redis_client] = lambda: fake_redis
    app.dependency_overrides[get_change_relay] = lambda: change_relay
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
