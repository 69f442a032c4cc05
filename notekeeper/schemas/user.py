"""
Notekeeper — User Request/Response Schemas
============================================

What:  API contract for registration (POST /api/users) and listing (GET /api/users).
Note:  No response model has a password or hash field, so neither can leak.
"""

import uuid
from typing import List

from pydantic import BaseModel, Field

from notekeeper.schemas.note import NoteSummary


class UserCreate(BaseModel):
    """Body of POST /api/users. Length rules are enforced by UserService."""
    username: str = Field(description="Unique login name (min 3 characters)")
    name: str = Field(default="", description="Display name")
    password: str = Field(description="Plain password (min 3 characters, max 72 bytes)")


class UserResponse(BaseModel):
    """A user and the notes they own."""
    id: uuid.UUID = Field(description="Unique user identifier")
    username: str
    name: str
    notes: List[NoteSummary] = Field(default_factory=list)
