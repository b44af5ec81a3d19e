"""Test configuration and fixtures."""

from typing import Any, Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from issue_tracker.api import app
from issue_tracker.db.base import Base, get_db
from issue_tracker.issues import IssueService, SQLAlchemyIssueStore


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create a fresh in-memory database for each test."""
    from issue_tracker.db import models  # noqa: F401

    test_engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine: Engine) -> Generator[Session, None, None]:
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def store(db_session: Session) -> SQLAlchemyIssueStore:
    return SQLAlchemyIssueStore(db_session)


@pytest.fixture
def service(store: SQLAlchemyIssueStore) -> IssueService:
    return IssueService(store)


@pytest.fixture
def client(engine: Engine) -> Generator[TestClient, None, None]:
    """API client whose requests use the in-memory database."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_issue_payload():
    """Build a valid creation payload with optional overrides."""

    def _make(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "issue_title": "Login button unresponsive",
            "issue_text": "Clicking the button on /login does nothing.",
            "created_by": "alice",
        }
        payload.update(overrides)
        return payload

    return _make
