"""
Notekeeper — Application Package Initializer
==============================================

What: Marks the `notekeeper` directory as a Python package.
Who:  Imported by uvicorn (`notekeeper.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │   Routes + Dependencies (API Layer) │  ← HTTP, status codes, bearer header
    ├─────────────────────────────────────┤
    │  Services (Auth / Note / User)      │  ← credentials, tokens, ownership
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← explicitly constructed handle
    └─────────────────────────────────────┘

    Routes never touch SQL; services never touch HTTP.
"""

__version__ = "1.0.0"
