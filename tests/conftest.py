"""
Pytest configuration: bind the session factory to an in-memory SQLite
database, freeze the clock and stub the OpenObserve sink and the Redis lock
so that no external service is needed.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from distribution.src import openobserve, scheduler
from distribution.src.db import ORMbase, sessionMaker


testEngine = create_engine(
    "sqlite://",
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeLock:
    def __init__(self, registry):
        self.registry = registry

    def release(self):
        self.registry.held = False


class FakeLockRegistry:
    """Stands in for the Redis transition lock, `held` simulates another run."""

    def __init__(self):
        self.held = False
        self.acquired = 0

    def acquire(self, resourceName, timeOut):
        if self.held:
            return None
        self.held = True
        self.acquired += 1
        return FakeLock(self)

    def release(self, lock):
        if lock is not None:
            lock.release()


@pytest.fixture(autouse=True)
def database():
    sessionMaker.configure(bind=testEngine)
    ORMbase.metadata.create_all(testEngine)
    yield
    ORMbase.metadata.drop_all(testEngine)


@pytest.fixture
def session(database):
    session = sessionMaker()
    yield session
    session.close()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture(autouse=True)
def events(monkeypatch):
    shipped = []
    monkeypatch.setattr(openobserve, "logEvent", shipped.append)
    return shipped


@pytest.fixture(autouse=True)
def transitionLock(monkeypatch):
    registry = FakeLockRegistry()
    monkeypatch.setattr(scheduler, "acquireLock", registry.acquire)
    monkeypatch.setattr(scheduler, "releaseLock", registry.release)
    return registry


@pytest.fixture
def client():
    from distribution.main import app

    return TestClient(app)
