"""
Notekeeper — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock session for service unit tests (no DB)
    ├── identity:         A UserIdentity as produced by a verified token
    ├── database:         Fresh in-memory SQLite Database with all tables
    ├── seeded_user:      "testuser" / "testpassword" owning INITIAL_NOTES
    ├── app:              create_app() bound to `database`
    ├── test_client:      HTTPX AsyncClient over ASGITransport
    └── auth_headers:     Bearer header obtained through POST /api/login
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Override settings for testing BEFORE any notekeeper imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-0123456789-abcdefghijklmnopqrstuvwxyz"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt minimum; keeps hashing fast
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOGIN_RATE_LIMIT_REQUESTS"] = "1000"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from notekeeper.database import Database
from notekeeper.main import create_app
from notekeeper.models import Note
from notekeeper.schemas.auth import UserIdentity

from helpers import INITIAL_NOTES, TEST_PASSWORD, TEST_USERNAME, create_user, login


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures (no database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
        result = await note_service.get_note(mock_db_session, str(note_id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def identity():
    """The identity a verified token resolves to."""
    return UserIdentity(
        user_id=uuid4(),
        username=TEST_USERNAME,
        issued_at=datetime.now(timezone.utc),
    )


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database():
    """
    A private in-memory database per test.

    StaticPool keeps the single SQLite connection alive across sessions,
    otherwise every new connection would see an empty database.
    """
    db = Database("sqlite+aiosqlite://", poolclass=StaticPool)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def seeded_user(database):
    """One user ("testuser") who owns every note in INITIAL_NOTES."""
    user = await create_user(database, TEST_USERNAME, TEST_PASSWORD, name="Test User")
    async with database.session_factory() as session:
        session.add_all([Note(**note, user_id=user.id) for note in INITIAL_NOTES])
        await session.commit()
    return user


# ══════════════════════════════════════════════════════════════════════════
# API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport sends no lifespan events, so the test database is never
    disposed mid-test.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def auth_headers(test_client, seeded_user):
    """Authorization header for "testuser", obtained through the login endpoint."""
    return await login(test_client, TEST_USERNAME, TEST_PASSWORD)
