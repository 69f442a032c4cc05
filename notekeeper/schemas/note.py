"""
Notekeeper — Note Request/Response Schemas
============================================

What:  Pydantic models defining the notes API contract.
How:   FastAPI validates request bodies against these and serializes responses.

Persisted note JSON shape:
    {"id": "<uuid>", "content": "...", "important": false, "user": "<owner uuid>"}
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    """
    What:  Body of POST /api/notes.

    Only `content` and `important` are read. Any other key, including an
    attempt to set the owner ("user", "user_id"), is dropped during parsing.
    `content` is optional here so that a missing or empty value reaches
    NoteService and is reported as a 400 validation error.
    """
    content: Optional[str] = Field(default=None, description="Note text (required, non-empty)")
    important: Optional[bool] = Field(default=None, description="Importance flag (default false)")

    model_config = {"extra": "ignore"}


class NoteResponse(BaseModel):
    """
    What:  Full representation of a stored note.
    Who:   Returned by list, get and create.
    """
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    content: str = Field(description="Note text")
    important: bool = Field(description="Importance flag")
    user: uuid.UUID = Field(description="Identifier of the owning user")


class NoteSummary(BaseModel):
    """Compact note embedded in user listings (owner is implied)."""
    id: uuid.UUID
    content: str
    important: bool
