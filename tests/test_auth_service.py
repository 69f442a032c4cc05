"""
Notekeeper — Auth Service Unit Tests
======================================

What:  Password hashing, token issue/verify, bearer header parsing, login.
How:   A dedicated AuthService with a known secret; UserService is patched
       so login runs without a database.

What we test:
    ✅ Hashes are salted and one-way; verify never raises
    ✅ Issued tokens authenticate back to the same identity
    ✅ Expired, tampered, foreign-key and sub-less tokens are rejected
    ✅ Headers without the Bearer scheme are malformed
    ✅ Unknown user and wrong password fail identically
"""

import threading

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import jwt

from notekeeper.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    MalformedAuthHeaderError,
)
from notekeeper.services.auth_service import AuthService

SECRET = "unit-test-secret-0123456789-abcdefghijklmnop"


@pytest.fixture
def service():
    return AuthService(secret=SECRET, expire_minutes=5, bcrypt_rounds=4)


class TestPasswords:

    def test_hash_is_not_the_password(self, service):
        hashed = service.hash_password("testpassword")
        assert hashed != "testpassword"
        assert hashed.startswith("$2")

    def test_hash_is_salted(self, service):
        assert service.hash_password("same") != service.hash_password("same")

    def test_verify_matches(self, service):
        hashed = service.hash_password("testpassword")
        assert service.verify_password("testpassword", hashed) is True
        assert service.verify_password("wrongpassword", hashed) is False

    def test_verify_malformed_hash_is_false(self, service):
        assert service.verify_password("testpassword", "not-a-bcrypt-hash") is False


class TestTokens:

    def test_token_round_trip(self, service):
        user_id = uuid4()
        token = service.issue_token(user_id, "testuser")

        identity = service.authenticate(f"Bearer {token}")

        assert identity.user_id == user_id
        assert identity.username == "testuser"
        assert identity.issued_at <= datetime.now(timezone.utc)

    def test_scheme_is_case_insensitive(self, service):
        user_id = uuid4()
        token = service.issue_token(user_id, "testuser")
        assert service.authenticate(f"bearer {token}").user_id == user_id

    def test_expired_token(self, service):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": str(uuid4()), "iat": past, "exp": past + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError, match="expired"):
            service.verify_token(token)

    def test_tampered_signature(self, service):
        token = service.issue_token(uuid4(), "testuser")
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        with pytest.raises(InvalidTokenError):
            service.verify_token(f"{header}.{payload}.{flipped}")

    def test_token_signed_with_another_secret(self, service):
        other = AuthService(secret="another-secret-0123456789-abcdefghijklmnop")
        with pytest.raises(InvalidTokenError):
            service.verify_token(other.issue_token(uuid4(), "testuser"))

    def test_garbage_token(self, service):
        with pytest.raises(InvalidTokenError):
            service.verify_token("definitely.not.a-jwt")

    def test_missing_sub_claim(self, service):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"username": "testuser", "iat": now, "exp": now + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            service.verify_token(token)

    def test_sub_must_be_a_user_id(self, service):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "root", "iat": now, "exp": now + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            service.verify_token(token)


class TestBearerHeader:

    @pytest.mark.parametrize("header", ["Token abc", "abc", "Basic dXNlcjpwYXNz", "Bearer", "Bearer   "])
    def test_malformed_headers(self, service, header):
        with pytest.raises(MalformedAuthHeaderError):
            service.extract_bearer_token(header)

    def test_extracts_token(self, service):
        assert service.extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"


class TestLogin:

    def _user(self, service, password="testpassword"):
        user = MagicMock()
        user.id = uuid4()
        user.username = "testuser"
        user.name = "Test User"
        user.password_hash = service.hash_password(password)
        return user

    @pytest.mark.asyncio
    async def test_login_success_issues_usable_token(self, service, mock_db_session):
        user = self._user(service)
        with patch("notekeeper.services.auth_service.user_service") as mock_users:
            mock_users.get_by_username = AsyncMock(return_value=user)

            result = await service.login(mock_db_session, "testuser", "testpassword")

        assert result.username == "testuser"
        assert result.name == "Test User"
        assert service.authenticate(f"Bearer {result.token}").user_id == user.id

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_are_indistinguishable(
        self, service, mock_db_session
    ):
        user = self._user(service)
        with patch("notekeeper.services.auth_service.user_service") as mock_users:
            mock_users.get_by_username = AsyncMock(return_value=None)
            with pytest.raises(InvalidCredentialsError) as unknown:
                await service.login(mock_db_session, "nobody", "testpassword")

            mock_users.get_by_username = AsyncMock(return_value=user)
            with pytest.raises(InvalidCredentialsError) as wrong:
                await service.login(mock_db_session, "testuser", "wrongpassword")

        assert unknown.value.message == wrong.value.message
        assert type(unknown.value) is type(wrong.value)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [("", "testpassword"), ("testuser", "")])
    async def test_empty_credentials_rejected(self, service, mock_db_session, username, password):
        with patch("notekeeper.services.auth_service.user_service") as mock_users:
            mock_users.get_by_username = AsyncMock()
            with pytest.raises(InvalidCredentialsError):
                await service.login(mock_db_session, username, password)
            mock_users.get_by_username.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_username_is_normalized_before_lookup(self, service, mock_db_session):
        user = self._user(service)
        with patch("notekeeper.services.auth_service.user_service") as mock_users:
            mock_users.get_by_username = AsyncMock(return_value=user)

            await service.login(mock_db_session, "  testuser ", "testpassword")

        mock_users.get_by_username.assert_awaited_once_with(mock_db_session, "testuser")

    @pytest.mark.asyncio
    async def test_dummy_hash_is_computed_off_the_event_loop(self, service, mock_db_session):
        loop_thread = threading.get_ident()
        hashing_threads = []
        real_hash = service.hash_password

        def recording_hash(password):
            hashing_threads.append(threading.get_ident())
            return real_hash(password)

        service.hash_password = recording_hash
        with patch("notekeeper.services.auth_service.user_service") as mock_users:
            mock_users.get_by_username = AsyncMock(return_value=None)
            with pytest.raises(InvalidCredentialsError):
                await service.login(mock_db_session, "nobody", "testpassword")

        assert len(hashing_threads) == 1
        assert hashing_threads[0] != loop_thread
