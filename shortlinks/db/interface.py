"""
Database Abstraction Interface

Backends are plugged in through an adapter that builds the async engine.

The service layer only needs two guarantees from a backend:
- a unique index whose violation raises IntegrityError (short id allocation)
- transactions in which an UPDATE ... SET n = n + 1 and an INSERT commit or
  roll back together (visit recording)
Adapters configure the engine so that these hold under concurrent writers.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Builds and configures the engine for one database backend.

    create_engine() must run configure_connection() on every new DBAPI
    connection, so per-connection settings hold for pooled and
    unpooled engines alike.
    """

    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Extra engine options, overriding get_engine_kwargs()

        Returns:
            Configured AsyncEngine instance
        """
        pass

    @abstractmethod
    def configure_connection(self, dbapi_connection, connection_record) -> None:
        """
        Per-connection setup, registered as the engine's "connect" listener.

        Used for settings the backend keeps per connection rather than per
        database, such as SQLite's foreign key enforcement.
        """
        pass

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """Pool class for the engine, or None for SQLAlchemy's default."""
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """DBAPI connect() arguments."""
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        pass
