"""Pytest fixtures and configuration for rightnow tests."""

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from rightnow.database.database import Base
from rightnow.database.repository import TaskRepository
from rightnow.integrations.calendar_source import StaticCalendarSource
from rightnow.models.task import Task


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Fixed reference time for deterministic scoring
NOW = datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    from rightnow.database import models  # noqa: F401

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def sample_task_base(now):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "title": "Test Task",
        "notes": None,
        "created_at": now,
        "deadline": None,
        "estimated_minutes": None,
        "importance": None,
        "effort": None,
        "energy": None,
        "starred_for": None,
        "completed_at": None,
    }


@pytest.fixture
def make_task(sample_task_base):
    """Factory fixture: build a Task with a fresh id and the given overrides."""
    def _make(**overrides):
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def calendar_source():
    """Calendar source with access granted and no events."""
    return StaticCalendarSource([])


@pytest.fixture
def test_client(db_session: Session, calendar_source):
    """Create a FastAPI test client with overridden database and calendar dependencies."""
    from rightnow.api.app import app, get_calendar_source
    from rightnow.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_calendar_source] = lambda: calendar_source

    # Not used as a context manager: the lifespan hook would create the real database
    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
