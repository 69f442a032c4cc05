"""
Notekeeper — Note Service
===========================

What:  list/get/create/delete for notes, including the ownership rules.
How:   Receives the request's AsyncSession (and, for mutations, the verified
       UserIdentity) on every call; holds no state of its own.
Who:   Called by the /api/notes route handlers.

Authorization Rules:
    list, get   → public
    create      → any valid token; owner := token identity, never the payload
    delete      → valid token; note must be owned by the token identity
                  (absent note → success, nothing to check)

Identifier Rules:
    "not-a-uuid"           → InvalidIdError (400)
    well-formed, no record → NotFoundError (404) for get, no-op for delete
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.exceptions import (
    DatabaseError,
    ForbiddenError,
    InvalidIdError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from notekeeper.models import Note, User
from notekeeper.schemas.auth import UserIdentity
from notekeeper.schemas.note import NoteCreate, NoteResponse

logger = logging.getLogger(__name__)


def parse_note_id(note_id: str) -> uuid.UUID:
    """Parse a path identifier, raising InvalidIdError if it is not a UUID."""
    try:
        return uuid.UUID(note_id)
    except (ValueError, AttributeError, TypeError):
        raise InvalidIdError(resource="note", resource_id=str(note_id))


def to_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        content=note.content,
        important=note.important,
        user=note.user_id,
    )


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        SQLAlchemy errors are wrapped in DatabaseError (generic 500, details
        logged). Our own exceptions propagate unchanged to the global handlers.
    """

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        Return every note.

        Ordered by creation time so repeated calls are stable; clients must
        not rely on the order.
        """
        try:
            result = await db.execute(select(Note).order_by(Note.created_at))
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [to_response(note) for note in notes]

    async def get_note(self, db: AsyncSession, note_id: str) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            InvalidIdError: note_id is not a UUID (→ 400)
            NotFoundError:  no note with that id (→ 404)
            DatabaseError:  query failed (→ 500)
        """
        parsed_id = parse_note_id(note_id)
        note = await self._fetch(db, parsed_id)
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(parsed_id))
        return to_response(note)

    async def create_note(
        self,
        db: AsyncSession,
        identity: UserIdentity,
        payload: NoteCreate,
    ) -> NoteResponse:
        """
        Create a note owned by the token's user.

        Raises:
            ValidationError:   content missing or blank (→ 400)
            UnauthorizedError: the token's user no longer exists (→ 401)
            DatabaseError:     insert failed (→ 500)
        """
        if payload.content is None or not payload.content.strip():
            raise ValidationError(message="content is required", field="content")

        try:
            owner = await db.get(User, identity.user_id)
        except SQLAlchemyError as e:
            logger.error("Database error loading note owner: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        if owner is None:
            logger.warning("Create rejected: token user %s no longer exists", identity.user_id)
            raise UnauthorizedError(message="token user no longer exists")

        note = Note(
            content=payload.content,
            important=bool(payload.important),
            user_id=identity.user_id,
        )
        try:
            db.add(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note %s created by %s", note.id, identity.user_id)
        return to_response(note)

    async def delete_note(
        self,
        db: AsyncSession,
        identity: UserIdentity,
        note_id: str,
    ) -> None:
        """
        Delete a note if it exists and belongs to the caller.

        Raises:
            InvalidIdError: note_id is not a UUID (→ 400)
            ForbiddenError: the note belongs to someone else (→ 403)
            DatabaseError:  delete failed (→ 500)
        """
        parsed_id = parse_note_id(note_id)
        note = await self._fetch(db, parsed_id)

        if note is None:
            logger.info("Delete of absent note %s treated as success", parsed_id)
            return

        if note.user_id != identity.user_id:
            logger.warning(
                "Delete of note %s refused: owner %s, caller %s",
                parsed_id,
                note.user_id,
                identity.user_id,
            )
            raise ForbiddenError(context={"note_id": str(parsed_id)})

        try:
            await db.delete(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", parsed_id, str(e))
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(parsed_id)},
            )

        logger.info("Note %s deleted by %s", parsed_id, identity.user_id)

    async def _fetch(self, db: AsyncSession, note_id: uuid.UUID):
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
