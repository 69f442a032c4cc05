"""
Notekeeper — Notes Route Handlers
===================================

What:  GET/POST /api/notes and GET/DELETE /api/notes/{id}.
How:   Thin handlers: pull the session (and identity for mutations) from
       dependencies, delegate to NoteService, set the status code.

The id path parameter is typed `str`, not `UUID`: malformed ids must reach
NoteService and come back as 400 invalid_id rather than FastAPI's 422.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import get_db_session
from notekeeper.dependencies import get_current_identity
from notekeeper.schemas.auth import UserIdentity
from notekeeper.schemas.common import ErrorResponse
from notekeeper.schemas.note import NoteCreate, NoteResponse
from notekeeper.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all notes",
)
async def list_notes(
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    return await note_service.list_notes(db=db)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed note id", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db=db, note_id=note_id)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Missing or empty content", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
    },
    summary="Create a note owned by the caller",
    description=(
        "Requires `Authorization: Bearer <token>`. The owner is always the token's "
        "user; an owner field in the body is ignored."
    ),
)
async def create_note(
    payload: NoteCreate,
    identity: UserIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db=db, identity=identity, payload=payload)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses={
        400: {"description": "Malformed note id", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        403: {"description": "Caller does not own the note", "model": ErrorResponse},
    },
    summary="Delete a note the caller owns",
    description="Deleting a note that does not exist also returns 204.",
)
async def delete_note(
    note_id: str,
    identity: UserIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db=db, identity=identity, note_id=note_id)
    return Response(status_code=204)
