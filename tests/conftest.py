"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from src.database import Base, Database, get_db
from src.main import app
from src.models.user import User
from src.services.auth import create_access_token


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/cold_dm_tracker", "/cold_dm_tracker_test"
    )
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

test_database = Database(SQLALCHEMY_DATABASE_URL)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    test_database.create_all()
    yield
    test_database.close()


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = test_database.session_factory()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.state.database = test_database
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.database = None


def _sign_in(client, email: str, timezone: str) -> AuthHeaders:
    token = create_access_token(email, timezone=timezone)
    headers = {"Authorization": f"Bearer {token}"}
    response = client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 200
    return AuthHeaders(headers, user_id=response.json()["id"], email=email)


@pytest.fixture
def auth_headers(client):
    """Sign in a user and return auth headers with user info."""
    return _sign_in(client, "test@example.com", "America/New_York")


@pytest.fixture
def other_auth_headers(client):
    """Sign in a second, unrelated user."""
    return _sign_in(client, "other@example.com", "Europe/London")


@pytest.fixture
def make_user(db):
    """Factory for users created directly in the database."""

    def _make_user(
        email: str = "owner@example.com",
        timezone: str = "America/New_York",
        email_reminders_enabled: bool = True,
    ) -> User:
        user = User(
            email=email,
            timezone=timezone,
            email_reminders_enabled=email_reminders_enabled,
            onboarded=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


class FixedClock:
    """Callable clock that returns a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    """Clock fixed at 2026-10-19 12:00 UTC (08:00 in New York)."""
    return FixedClock(datetime(2026, 10, 19, 12, 0, tzinfo=UTC))
