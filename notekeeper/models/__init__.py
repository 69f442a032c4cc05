"""
Notekeeper — ORM Models
=========================

Importing this package registers every model with `Base.metadata`, so the
User ↔ Note relationship resolves no matter which model is imported first.
"""

from notekeeper.models.user import User
from notekeeper.models.note import Note

__all__ = ["User", "Note"]
