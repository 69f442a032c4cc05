"""
Notekeeper — Authentication Service
=====================================

What:  Password hashing, login, and bearer-token issuance/verification.
How:   bcrypt for salted one-way password hashes, PyJWT (HS256 by default)
       for signed, stateless tokens.
Who:   Login route, the `get_current_identity` dependency, UserService.
       One instance per app, built by create_app() and kept on app.state.

Login flow:
    ┌──────────┐   username    ┌──────────────┐  hash   ┌────────────┐
    │  /login  │──────────────▶│ UserService  │────────▶│  checkpw   │
    └──────────┘               └──────────────┘         └─────┬──────┘
                                                              │ match
                                        JWT {sub, username, iat, exp}

Protected request flow:
    "Authorization: Bearer <jwt>" → extract_bearer_token → verify_token
    → UserIdentity (no database access)

Unknown usernames still pay for one bcrypt comparison (against a dummy hash),
so both login failures take roughly the same time and return the same body.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.config import Settings
from notekeeper.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    MalformedAuthHeaderError,
)
from notekeeper.schemas.auth import LoginResponse, UserIdentity
from notekeeper.services.user_service import normalize_username, user_service

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "
REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class AuthService:
    """Service for password hashing, login and JWT management."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        bcrypt_rounds: int = 12,
    ):
        """
        Args:
            secret: HMAC key tokens are signed with
            algorithm: JWT signing algorithm
            expire_minutes: Token lifetime
            bcrypt_rounds: bcrypt cost factor for new hashes
        """
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.bcrypt_rounds = bcrypt_rounds
        self._dummy_hash: Optional[str] = None

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "AuthService":
        """Build the service an app instance uses from its own Settings."""
        return cls(
            secret=app_settings.jwt_secret,
            algorithm=app_settings.jwt_algorithm,
            expire_minutes=app_settings.token_expire_minutes,
            bcrypt_rounds=app_settings.bcrypt_rounds,
        )

    # ── Passwords ─────────────────────────────────────────────────────────

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh salt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        Returns False (never raises) for malformed hashes or passwords bcrypt
        refuses, so callers only ever see match / no match.
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError:
            return False

    async def hash_password_async(self, password: str) -> str:
        """hash_password on a worker thread; bcrypt is CPU-bound."""
        return await asyncio.to_thread(self.hash_password, password)

    async def verify_password_async(self, password: str, password_hash: str) -> bool:
        """verify_password on a worker thread."""
        return await asyncio.to_thread(self.verify_password, password, password_hash)

    async def _get_dummy_hash(self) -> str:
        """Lazily hashed once per service, on a worker thread like any other hash."""
        if self._dummy_hash is None:
            self._dummy_hash = await self.hash_password_async(uuid.uuid4().hex)
        return self._dummy_hash

    # ── Tokens ────────────────────────────────────────────────────────────

    def issue_token(self, user_id: uuid.UUID, username: str) -> str:
        """Create a signed JWT for this user.

        Args:
            user_id: Placed in the 'sub' claim as a string
            username: Included for display; not trusted for authorization

        Returns:
            Encoded JWT string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "username": username,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        logger.debug(
            "Token issued for %s (expires in %d min)", username, self.expire_minutes
        )
        return token

    def verify_token(self, token: str) -> UserIdentity:
        """Decode and validate a JWT.

        Raises:
            InvalidTokenError: Bad signature, corrupt token, expired, or bad claims
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError(message="token expired", context={"reason": "expired"})
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(context={"reason": type(e).__name__})

        try:
            user_id = uuid.UUID(str(payload["sub"]))
        except ValueError:
            raise InvalidTokenError(context={"reason": "sub is not a user id"})

        return UserIdentity(
            user_id=user_id,
            username=str(payload.get("username", "")),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        )

    def extract_bearer_token(self, authorization: str) -> str:
        """Pull the token out of an `Authorization: Bearer <token>` value.

        Raises:
            MalformedAuthHeaderError: Wrong scheme or empty token
        """
        if not authorization.lower().startswith(BEARER_PREFIX):
            raise MalformedAuthHeaderError()
        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise MalformedAuthHeaderError(message="Bearer token is empty")
        return token

    def authenticate(self, authorization: str) -> UserIdentity:
        """Header value → verified identity. Never touches the database."""
        return self.verify_token(self.extract_bearer_token(authorization))

    # ── Login ─────────────────────────────────────────────────────────────

    async def login(self, db: AsyncSession, username: str, password: str) -> LoginResponse:
        """
        Check a username/password pair and issue a token.

        Raises:
            InvalidCredentialsError: Unknown user or wrong password (same message)
            DatabaseError: Store lookup failed
        """
        username = normalize_username(username)
        if not username or not password:
            raise InvalidCredentialsError(context={"reason": "empty"})

        user = await user_service.get_by_username(db, username)

        if user is None:
            await self.verify_password_async(password, await self._get_dummy_hash())
            logger.warning("Login failed: unknown username")
            raise InvalidCredentialsError(context={"reason": "unknown_user"})

        if not await self.verify_password_async(password, user.password_hash):
            logger.warning("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentialsError(context={"reason": "bad_password"})

        token = self.issue_token(user.id, user.username)
        logger.info("User %s logged in", user.id)
        return LoginResponse(token=token, username=user.username, name=user.name)

