"""
Notekeeper — Login Route Handler
==================================

What:  POST /api/login exchanges a username/password for a bearer token.
Who:   Clients before calling POST/DELETE on /api/notes.

Rate limited per IP by LoginRateLimitMiddleware.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import get_db_session
from notekeeper.dependencies import get_auth_service
from notekeeper.schemas.auth import LoginRequest, LoginResponse
from notekeeper.schemas.common import ErrorResponse
from notekeeper.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid username or password", "model": ErrorResponse},
        429: {"description": "Too many login attempts", "model": ErrorResponse},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    return await auth.login(
        db=db,
        username=credentials.username,
        password=credentials.password,
    )
