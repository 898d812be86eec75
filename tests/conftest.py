"""Shared fixtures: in-memory SQLite standing in for the managed Postgres view."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from liftops.database import Base, create_session_factory
from liftops.main import create_app


def _sqlite_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    engine = _sqlite_engine()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def broken_engine():
    """Engine with no tables: every calendar query fails"""
    engine = _sqlite_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    app = create_app(session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_client(broken_engine):
    app = create_app(session_factory=create_session_factory(broken_engine))
    with TestClient(app) as test_client:
        yield test_client

