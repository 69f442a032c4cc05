"""
Notekeeper — User Service
===========================

What:  Credential store access: lookup by username, registration, listing.
Who:   AuthService (lookup during login) and the /api/users routes.

Registration rules:
    - username and password are at least 3 characters, username at most 64
    - password is at most 72 bytes (bcrypt ignores anything past that)
    - username is unique; the DB unique constraint backs up the pre-check
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from notekeeper.exceptions import DatabaseError, ValidationError
from notekeeper.models import User
from notekeeper.schemas.note import NoteSummary
from notekeeper.schemas.user import UserCreate, UserResponse

if TYPE_CHECKING:
    from notekeeper.services.auth_service import AuthService

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 64  # users.username is String(64)
MIN_PASSWORD_LENGTH = 3
MAX_PASSWORD_BYTES = 72


def normalize_username(username: str) -> str:
    """Registration and login compare usernames after the same normalization."""
    return username.strip()


class UserService:
    """
    Business logic for user records.

    Password hashing is delegated to AuthService so the hashing policy
    (algorithm, work factor) lives in one place.
    """

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        """Return the user with this username, or None."""
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def create_user(
        self,
        db: AsyncSession,
        payload: UserCreate,
        auth: "AuthService",
    ) -> UserResponse:
        """
        Register a new user; `auth` supplies the app's password hasher.

        Raises:
            ValidationError: Bad username/password, or the username is taken
            DatabaseError:   Any other store failure
        """
        username = normalize_username(payload.username)
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(
                message=f"username must be at least {MIN_USERNAME_LENGTH} characters long",
                field="username",
            )
        if len(username) > MAX_USERNAME_LENGTH:
            raise ValidationError(
                message=f"username must be at most {MAX_USERNAME_LENGTH} characters long",
                field="username",
            )
        if len(payload.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                message=f"password must be at least {MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )
        if len(payload.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                message=f"password must be at most {MAX_PASSWORD_BYTES} bytes long",
                field="password",
            )

        if await self.get_by_username(db, username) is not None:
            raise ValidationError(message="expected `username` to be unique", field="username")

        password_hash = await auth.hash_password_async(payload.password)
        user = User(username=username, name=payload.name, password_hash=password_hash)

        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Concurrent registration won the race to the unique index
            raise ValidationError(message="expected `username` to be unique", field="username")
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User registered: %s (%s)", user.username, user.id)
        return UserResponse(id=user.id, username=user.username, name=user.name, notes=[])

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        """Every user with the notes they own."""
        try:
            result = await db.execute(
                select(User).options(selectinload(User.notes)).order_by(User.created_at)
            )
            users = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [
            UserResponse(
                id=user.id,
                username=user.username,
                name=user.name,
                notes=[
                    NoteSummary(id=note.id, content=note.content, important=note.important)
                    for note in user.notes
                ],
            )
            for user in users
        ]


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
