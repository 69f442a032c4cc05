"""
Notekeeper — FastAPI Dependencies for Authentication
======================================================

What:  Resolves the app's AuthService and turns the Authorization header
       into a verified UserIdentity.
Who:   Injected into POST /api/login, POST /api/users, POST /api/notes and
       DELETE /api/notes/{id}.

Failures (all → 401 with WWW-Authenticate: Bearer):
    header absent           → UnauthorizedError
    not "Bearer <token>"    → MalformedAuthHeaderError
    bad/expired token       → InvalidTokenError
"""

from typing import Optional

from fastapi import Depends, Header, Request

from notekeeper.exceptions import UnauthorizedError
from notekeeper.schemas.auth import UserIdentity
from notekeeper.services.auth_service import AuthService


def get_auth_service(request: Request) -> AuthService:
    """The AuthService create_app() built from this app's settings."""
    return request.app.state.auth_service


async def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    auth: AuthService = Depends(get_auth_service),
) -> UserIdentity:
    """Extract and verify the bearer token for a protected route."""
    if not authorization:
        raise UnauthorizedError()
    return auth.authenticate(authorization)
