"""
Notekeeper — User Route Handlers
==================================

What:  POST /api/users (registration) and GET /api/users (listing with notes).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import get_db_session
from notekeeper.dependencies import get_auth_service
from notekeeper.schemas.common import ErrorResponse
from notekeeper.schemas.user import UserCreate, UserResponse
from notekeeper.services.auth_service import AuthService
from notekeeper.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users",
    status_code=201,
    response_model=UserResponse,
    responses={
        400: {"description": "Invalid or duplicate username, weak password", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> UserResponse:
    return await user_service.create_user(db=db, payload=payload, auth=auth)


@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List users with the notes they own",
)
async def list_users(
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return await user_service.list_users(db=db)
