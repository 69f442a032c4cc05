"""
Notekeeper — Database Handle and Session Management
=====================================================

What:  Async SQLAlchemy engine + session factory wrapped in a `Database`
       handle, the declarative `Base`, and the per-request session dependency.
How:   `create_app()` constructs one `Database` and stores it on
       `app.state.database`; `get_db_session` pulls it from there for every
       request. Nothing here is a module-level engine, so tests can build an
       isolated in-memory database per test.
Who:   Used by route handlers via FastAPI's dependency injection system.

Connection Pooling (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour
    SQLite URLs skip the pool arguments (its dialect picks its own pool).
"""

import logging
from typing import Any, AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notekeeper.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    migrations and the test suite uses for `create_all`.
    """
    pass


class Database:
    """
    Explicitly constructed handle to one database.

    Attributes:
        engine:          The async engine (owns the connection pool)
        session_factory: Creates a new AsyncSession per unit of work
    """

    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        # expire_on_commit=False: response models read attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "Database":
        """Build the handle from configuration, with pooling for server databases."""
        engine_kwargs: dict[str, Any] = {
            "echo": app_settings.log_level == "DEBUG",
        }
        if not app_settings.database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=app_settings.db_pool_size,
                max_overflow=app_settings.db_max_overflow,
                pool_pre_ping=app_settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(app_settings.database_url, **engine_kwargs)

    async def create_all(self) -> None:
        """Create every mapped table. Used by tests and local SQLite setups."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database handle
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back, then re-raises for the global error handler
        5. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            # Roll back for ANY failure, including non-DB errors raised after a flush
            await session.rollback()
            raise
        finally:
            await session.close()
