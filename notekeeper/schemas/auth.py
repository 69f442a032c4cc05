"""
Notekeeper — Authentication Schemas
=====================================

What:  Login request/response bodies and the identity carried by a token.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    username: str = Field(description="Login name")
    password: str = Field(description="Plain password")


class LoginResponse(BaseModel):
    """
    What:  Successful login result.
    How:   Client sends `token` back as `Authorization: Bearer <token>`.
    """
    token: str = Field(description="Signed bearer token")
    username: str
    name: str


class UserIdentity(BaseModel):
    """
    Identity embedded in a verified token.

    A reference to the user at issuance time, not a fresh database read;
    callers that need current attributes must query the user store.
    """
    user_id: uuid.UUID
    username: str
    issued_at: datetime

    model_config = {"frozen": True}
