"""
Notekeeper — Note SQLAlchemy Model
====================================

What:  ORM model representing the `notes` table (the note store).
How:   Inherits from the declarative Base; Alembic reads this for migrations.
Who:   Used by NoteService for list/get/create/delete.

Table Design:
    - UUID primary key: non-sequential, and the API's explicit identifier type
    - content: TEXT, required; emptiness is rejected in the service layer
    - important: boolean flag, false unless the client says otherwise
    - user_id: owner FK, set once at creation from the token identity
    - created_at: UTC with timezone; gives list_notes a stable order

    Index on created_at keeps the full-list query ordered without a sort.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notekeeper.database import Base

if TYPE_CHECKING:
    from notekeeper.models.user import User


class Note(Base):
    """
    A short text note owned by exactly one user.

    Lifecycle:
        absent → present  only through NoteService.create_note
        present → absent  only through NoteService.delete_note (owner only)
        Never updated; the owner is immutable.
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    important: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    # No ON DELETE action: removing a user later leaves its notes as they are
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    owner: Mapped["User"] = relationship(back_populates="notes")

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return (
            f"<Note(id={self.id}, important={self.important}, "
            f"user_id={self.user_id})>"
        )
