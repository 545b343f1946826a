import os

# Settings are read at import time; keep tests off Postgres and Redis.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""

import pytest
import redis.exceptions
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shortlinks.main import app
from shortlinks.db.Models.models import Base
from shortlinks.db.Connection import database
from shortlinks.core.security import create_access_token


# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeRedis:
    """Dict-backed stand-in for the few redis commands the cache uses."""

    def __init__(self):
        self.store = {}
        self.down = False
        self.fail_deletes = False

    def _check(self):
        if self.down:
            raise redis.exceptions.ConnectionError("redis is down")

    def get(self, key):
        self._check()
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self._check()
        self.store[key] = value
        return True

    def delete(self, key):
        self._check()
        if self.fail_deletes:
            raise redis.exceptions.ConnectionError("connection reset during DEL")
        return 1 if self.store.pop(key, None) is not None else 0

    def ping(self):
        self._check()
        return True


@pytest.fixture
def db_session():
    """Creates a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Creates a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fake_redis(monkeypatch):
    """Enables the redirect cache against an in-process fake."""
    fake = FakeRedis()
    monkeypatch.setattr(database, "redis_client", fake)
    return fake


def auth_headers(owner_id):
    return {"Authorization": f"Bearer {create_access_token(owner_id)}"}


@pytest.fixture
def u1_headers():
    return auth_headers("u1")


@pytest.fixture
def u2_headers():
    return auth_headers("u2")


@pytest.fixture
def make_auth_headers():
    return auth_headers
