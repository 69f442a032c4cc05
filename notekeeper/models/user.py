"""
Notekeeper — User SQLAlchemy Model
====================================

What:  ORM model for the `users` table (the credential store).
Who:   Read by UserService/AuthService for login; written by registration.

Table Design:
    - UUID primary key, generated in Python so it works on PostgreSQL and SQLite
    - username: unique index; the only lookup key for login
    - password_hash: bcrypt output (60 chars); the plain password is never stored
    - notes: one-to-many back-reference to the notes this user owns
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notekeeper.database import Base

if TYPE_CHECKING:
    from notekeeper.models.note import Note


class User(Base):
    """
    An account that can log in and own notes.

    Lifecycle:
        Created by POST /api/users; never mutated or deleted by the API.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    notes: Mapped[List["Note"]] = relationship(back_populates="owner")

    def __repr__(self) -> str:
        # Never include password_hash
        return f"<User(id={self.id}, username='{self.username}')>"
