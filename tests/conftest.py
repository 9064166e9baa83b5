# tests/conftest.py

from __future__ import annotations

from datetime import date
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from taskzm.db.config import get_session
from taskzm.db.init import init_db
from taskzm.main import app
from taskzm.utils.metrics import metrics_collector


@pytest.fixture()
def engine():
    """
    In-memory SQLite engine shared by every connection of one test.

    StaticPool keeps a single connection so the schema created here is
    visible to the sessions FastAPI opens in its threadpool.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(session: Session) -> Iterator[TestClient]:
    """
    TestClient with the database dependency pointed at the test session.

    Not used as a context manager, so the startup hook (which would create
    tables in the configured database) never runs.
    """
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_metrics() -> None:
    metrics_collector.reset()


@pytest.fixture()
def today() -> date:
    """Fixed reference date for end-date validation."""
    return date(2024, 12, 15)


@pytest.fixture()
def template() -> dict:
    return {
        "title": "Water plants",
        "description": "Balcony and kitchen",
        "priority": "medium",
        "tags": ["home"],
        "assignee": "sam",
    }
