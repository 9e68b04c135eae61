"""Pytest fixtures and configuration for taskdesk tests."""

import os

# Keep the app's module-level engine off the developer database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from taskdesk.cache.memory_cache import MemoryCache
from taskdesk.database.database import Base
from taskdesk.database import models  # noqa: F401  (registers tables)
from taskdesk.database.repository import TaskRepository
from taskdesk.models.task import Task, TaskStatus, TaskPriority
from taskdesk.services.task_service import TaskService


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Fixed reference time for service and rule tests
FIXED_NOW = datetime(2025, 3, 1, 12, 0, 0)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def cache():
    """Fresh in-process cache."""
    return MemoryCache()


@pytest.fixture
def now():
    """Reference time used by the service clock."""
    return FIXED_NOW


@pytest.fixture
def task_service(task_repository, cache, now):
    """TaskService over the test database with a frozen clock."""
    return TaskService(task_repository, cache, clock=lambda: now)


@pytest.fixture
def sample_task_base(now):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    created = now - timedelta(days=1)
    return {
        "id": None,
        "title": "Test Task",
        "description": "Test description",
        "due_date": now + timedelta(days=2),
        "status": TaskStatus.PENDING,
        "priority": TaskPriority.NORMAL,
        "created_at": created,
        "updated_at": created,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def stored_task(task_repository, sample_task_base):
    """Factory that writes a task straight to storage (bypassing the rules)."""
    def _store(**overrides) -> Task:
        return task_repository.create(Task(**{**sample_task_base, **overrides}))
    return _store


@pytest.fixture
def test_client(db_session: Session, cache):
    """Create a FastAPI test client with overridden database and cache dependencies."""
    from taskdesk.api.app import app, get_cache
    from taskdesk.database.database import get_db

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
