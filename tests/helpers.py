"""
Notekeeper — Test Helpers
===========================

Seed data and database/login shortcuts shared by the API tests.
Imported after conftest.py has pointed the settings at the test environment.
"""

from typing import Dict, List
from uuid import uuid4

from httpx import AsyncClient
from sqlalchemy import func, select

from notekeeper.config import settings
from notekeeper.database import Database
from notekeeper.models import Note, User
from notekeeper.services.auth_service import AuthService

INITIAL_NOTES = [
    {"content": "HTML is easy", "important": False},
    {"content": "Browser can execute only JavaScript", "important": True},
    {"content": "GET and POST are the most important methods of HTTP protocol", "important": True},
    {"content": "A 404 is not the same thing as a 400", "important": False},
    {"content": "Tokens carry identity, not permissions", "important": False},
    {"content": "Only the owner may delete a note", "important": True},
]

TEST_USERNAME = "testuser"
TEST_PASSWORD = "testpassword"

# Same hashing settings as the apps under test
_hasher = AuthService.from_settings(settings)


async def create_user(database: Database, username: str, password: str, name: str = "") -> User:
    async with database.session_factory() as session:
        user = User(
            username=username,
            name=name,
            password_hash=_hasher.hash_password(password),
        )
        session.add(user)
        await session.commit()
        return user


async def notes_in_db(database: Database) -> List[Note]:
    async with database.session_factory() as session:
        result = await session.execute(select(Note).order_by(Note.created_at))
        return list(result.scalars().all())


async def count_notes(database: Database) -> int:
    async with database.session_factory() as session:
        result = await session.execute(select(func.count(Note.id)))
        return result.scalar() or 0


def non_existing_id() -> str:
    """A well-formed note id that no row uses."""
    return str(uuid4())


async def login(client: AsyncClient, username: str, password: str) -> Dict[str, str]:
    """POST /api/login and return a ready-to-send Authorization header."""
    response = await client.post(
        "/api/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
