"""
Database Session Management

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: engine configuration lives in the adapter
- Async session management: one session per request
- Error handling: Automatic rollback on exceptions
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortlinks.core.setting import settings
from shortlinks.db.sqlite_adapter import get_database_adapter

# Get the database adapter (SQLite by default)
db_adapter = get_database_adapter()

engine = db_adapter.create_engine(
    settings.DATABASE_URL
)


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """
    Build a session factory for the given engine.

    Sessions never expire loaded objects on commit so that a ShortLink can
    still be serialized after its creating transaction has finished.
    """
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async_session_maker = create_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session
    - Yields it to the endpoint
    - Rolls back on exception
    - Closes session automatically (context manager handles it)

    Services commit their own units of work, so nothing is committed here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create all tables that do not exist yet."""
    from shortlinks.db import models  # noqa: F401  (registers tables on metadata)

    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db(bind: AsyncEngine = engine) -> None:
    """Dispose the engine on shutdown."""
    await bind.dispose()
