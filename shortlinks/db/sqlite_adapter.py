"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

Key characteristics:
- File-based (single .db file)
- Single writer at a time (file locking): concurrent visit transactions
  queue on the write lock instead of interleaving, so increments are never lost
- Foreign keys are off by default and are switched on per connection
"""

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from shortlinks.core.setting import settings
from shortlinks.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    Args:
        busy_timeout: Seconds a connection waits on a locked database
                      before raising OperationalError
    """

    def __init__(self, busy_timeout: float = 30.0):
        self.busy_timeout = busy_timeout

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.

        SQLite-specific configuration:
        - NullPool: One connection per session, closed on release
        - check_same_thread=False: Required for async SQLite operations
        - timeout: Writers wait for the lock instead of failing immediately
        - PRAGMA foreign_keys=ON: Visit rows cascade with their link

        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)

        Returns:
            Configured AsyncEngine for SQLite
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        engine = create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )
        event.listen(engine.sync_engine, "connect", self.configure_connection)
        return engine

    def configure_connection(self, dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False,
            "timeout": self.busy_timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }


def get_database_adapter() -> DatabaseAdapter:
    """
    Factory function to get the database adapter.

    Returns:
        DatabaseAdapter instance configured from settings
    """
    return SQLiteAdapter(busy_timeout=settings.DATABASE_BUSY_TIMEOUT)
