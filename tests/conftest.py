"""
Test configuration and fixtures for Inkwell.

- Function-scoped engine: a fresh schema per test (in-memory SQLite unless
  TEST_DATABASE_URL points at PostgreSQL)
- TestClient with database dependency override
- Authenticated client fixtures
- Invite email sending is stubbed out for every test
"""

import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import User, Session as UserSession, Website
from tests.factories import create_user, create_website
from tests.fixtures.mocks import MockInviteNotifier


# =============================================================================
# Database Fixtures
# =============================================================================


def get_test_database_url() -> str:
    """
    Get the test database URL.

    TEST_DATABASE_URL wins; otherwise an in-memory SQLite database is used.
    Tables are created and dropped around every test, so never point this
    at a database you care about.
    """
    return os.environ.get("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture
def test_engine():
    database_url = get_test_database_url()

    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        # SQLite ignores foreign keys unless asked
        @event.listens_for(engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        engine = create_engine(database_url)

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """
    Provide a database session on a freshly created schema.

    Services commit and roll back for real, so data is committed too;
    isolation comes from the per-test schema.
    """
    TestingSessionLocal = sessionmaker(bind=test_engine)
    session = TestingSessionLocal()

    yield session

    session.close()


# =============================================================================
# TestClient Fixtures
# =============================================================================


def _override_get_db(db: Session):
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - managed by db fixture

    return override_get_db


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    TestClient with database dependency override.

    The database session is injected into the app's get_db dependency.
    """
    app.dependency_overrides[get_db] = _override_get_db(db)

    with TestClient(app) as test_client:
        # Set default Referer so CSRF Origin middleware allows requests
        test_client.headers["referer"] = "http://testserver/"
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Authentication Fixtures
# =============================================================================


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user."""
    return create_user(
        db,
        email="testuser@example.com",
        password="testpassword123",
        first_name="Test",
        last_name="User",
    )


@pytest.fixture
def admin_user(db: Session) -> User:
    """Create an admin test user."""
    return create_user(
        db, email="admin@example.com", password="adminpassword123", is_admin=True
    )


@pytest.fixture
def test_session(db: Session, test_user: User) -> UserSession:
    """Create a test session for the test user."""
    session = UserSession(
        user_id=test_user.id,
        token=secrets.token_urlsafe(32),
        expires_at=datetime.now(timezone.utc) + timedelta(days=7),
        user_agent="pytest-test-client",
        ip_address="127.0.0.1",
    )
    db.add(session)
    db.commit()
    return session


@pytest.fixture
def auth_client(
    db: Session, test_session: UserSession
) -> Generator[TestClient, None, None]:
    """
    Authenticated TestClient for the test user.

    Creates a separate TestClient instance to avoid cookie conflicts.
    """
    from app.config import settings

    app.dependency_overrides[get_db] = _override_get_db(db)

    with TestClient(app) as test_client:
        test_client.cookies.set(settings.session_cookie_name, test_session.token)
        # Set default Referer so CSRF Origin middleware allows requests
        test_client.headers["referer"] = "http://testserver/"
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def website(db: Session, test_user: User) -> Website:
    """A website owned by the test user."""
    return create_website(db, owner=test_user, name="Acme Blog")


@pytest.fixture
def invitee(db: Session) -> User:
    """A registered user who will be invited."""
    return create_user(
        db, email="invitee@example.com", first_name="Ivy", last_name="Invitee"
    )


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def mock_send_invite_email(monkeypatch) -> MagicMock:
    """
    Stub out queueing of invite emails.

    Applied to every test so nothing tries to reach Redis.
    """
    from app.workers.mail_worker import send_invite_email

    mock_send = MagicMock()
    monkeypatch.setattr(send_invite_email, "send", mock_send)
    return mock_send


@pytest.fixture
def mock_notifier() -> MockInviteNotifier:
    """Notifier double that records calls instead of rendering emails."""
    return MockInviteNotifier()


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "security: marks tests as security tests (deselect with '-m not security')",
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
