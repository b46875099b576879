"""Pytest fixtures and configuration for nltodo tests."""

import os

# Keep the application's own engine off the on-disk default database.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import json
import pytest
from datetime import datetime, timedelta
from typing import List, Union
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from nltodo.database.database import Base
from nltodo.database import models  # noqa: F401
from nltodo.database.repository import TaskRepository
from nltodo.engine.interpreter import CommandInterpreter
from nltodo.models.task_factory import create_task_base


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


class FakeClassifier:
    """Scripted intent classifier.

    Each classify() call pops the next scripted reply. A dict is sent back as JSON
    text, a string verbatim, an exception instance is raised.
    """

    def __init__(self, *replies: Union[dict, str, Exception]):
        self.replies: List[Union[dict, str, Exception]] = list(replies)
        self.prompts: List[str] = []

    def script(self, *replies: Union[dict, str, Exception]) -> "FakeClassifier":
        self.replies.extend(replies)
        return self

    def classify(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("FakeClassifier has no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    # StaticPool keeps the single in-memory database alive across sessions
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
        engine.dispose()


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def classifier():
    """Scripted classifier with no replies; tests script what they need."""
    return FakeClassifier()


@pytest.fixture
def interpreter(task_repository, classifier):
    """CommandInterpreter wired to the test store and the scripted classifier."""
    return CommandInterpreter(task_repository, classifier)


@pytest.fixture
def base_time():
    return datetime(2026, 1, 1, 9, 0, 0)


@pytest.fixture
def make_tasks(task_repository, base_time):
    """Insert tasks with strictly increasing created_at (one minute apart).

    Accepts titles or dicts of overrides; returns the created tasks in order.
    """
    def _make(*entries):
        created = []
        for i, entry in enumerate(entries):
            fields = {"title": entry} if isinstance(entry, str) else dict(entry)
            fields.setdefault("created_at", base_time + timedelta(minutes=i))
            created.append(task_repository.create(create_task_base(**fields)))
        return created
    return _make


@pytest.fixture
def test_client(db_session: Session, classifier):
    """Create a FastAPI test client with overridden database and classifier dependencies."""
    from nltodo.api.app import app
    from nltodo.database.database import get_db
    from nltodo.integrations.classifier import get_classifier

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_classifier] = lambda: classifier

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
