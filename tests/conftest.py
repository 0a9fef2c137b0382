"""
Pytest configuration and fixtures for testing.
"""
import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient, ASGITransport

from eventhub.main import app
from eventhub.db.session import get_repository
from eventhub.db.repositories import Repository
from eventhub.core.security import hash_password, issue_token
from eventhub.db.models import User, RoleEnum, Event, Vendor


@pytest.fixture
def repo() -> Repository:
    """A fresh, empty store for each test."""
    return Repository()


@pytest_asyncio.fixture(scope="function")
async def client(repo: Repository) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing API endpoints.
    Overrides the repository dependency with the per-test store.
    """
    app.dependency_overrides[get_repository] = lambda: repo

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(repo: Repository):
    """Factory inserting users straight into the store."""
    def _make_user(email: str, role: RoleEnum = RoleEnum.attendee, name: str = None) -> User:
        return repo.insert_user(User(
            name=name or email.split("@")[0].title(),
            email=email,
            hashed_password=hash_password("Test1234"),
            role=role,
        ))
    return _make_user


@pytest.fixture
def test_attendee(make_user) -> User:
    return make_user("attendee@example.com", RoleEnum.attendee, "Test Attendee")


@pytest.fixture
def test_organizer(make_user) -> User:
    return make_user("organizer@example.com", RoleEnum.organizer, "Test Organizer")


@pytest.fixture
def other_organizer(make_user) -> User:
    return make_user("other.organizer@example.com", RoleEnum.organizer, "Other Organizer")


@pytest.fixture
def test_vendor_user(make_user) -> User:
    return make_user("vendor@example.com", RoleEnum.vendor, "Test Vendor")


@pytest.fixture
def attendee_token(test_attendee: User) -> str:
    return issue_token(test_attendee)


@pytest.fixture
def organizer_token(test_organizer: User) -> str:
    return issue_token(test_organizer)


@pytest.fixture
def other_organizer_token(other_organizer: User) -> str:
    return issue_token(other_organizer)


@pytest.fixture
def vendor_token(test_vendor_user: User) -> str:
    return issue_token(test_vendor_user)


@pytest.fixture
def test_event(repo: Repository, test_organizer: User) -> Event:
    """An upcoming event with room for 50 attendees."""
    return repo.insert_event(Event(
        title="Test Event",
        description="A test event description",
        category="Conference",
        location="Test Location",
        date=datetime.now(timezone.utc) + timedelta(days=7),
        capacity=50,
        price=10.0,
        organizer=test_organizer.id,
    ))


@pytest.fixture
def test_vendor_profile(repo: Repository, test_vendor_user: User) -> Vendor:
    return repo.insert_vendor(Vendor(
        user_id=test_vendor_user.id,
        company_name="Acme Catering",
        description="Food for every occasion",
        contact_number="555-0100",
        address="1 Main Street",
    ))


@pytest.fixture(autouse=True)
def mock_password_hashing(monkeypatch):
    """
    Replace bcrypt with a cheap deterministic scheme so tests stay fast.
    This fixture is autouse, so it applies to all tests automatically.
    """
    class MockPasswordContext:
        """Mock password context that doesn't require bcrypt."""
        def hash(self, password: str) -> str:
            return f"$2b$12$mockedhash{password}"

        def verify(self, plain: str, hashed: str) -> bool:
            return hashed == f"$2b$12$mockedhash{plain}"

        def dummy_verify(self, elapsed: float = 0) -> bool:
            return False

    from eventhub.core import security
    monkeypatch.setattr(security, "pwd_context", MockPasswordContext())


@pytest.fixture(autouse=True)
def disable_rate_limiting(monkeypatch):
    """Disable rate limiting for all tests."""
    import eventhub.api.routes.auth as auth_routes
    monkeypatch.setattr(auth_routes.limiter, "enabled", False)
