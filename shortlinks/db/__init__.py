"""
Database module with abstraction layer.

This module provides:
- SQLiteAdapter: SQLite implementation of the DatabaseAdapter interface
- Session management: Database session creation and schema setup
"""

from shortlinks.db.session import (
    get_session,
    create_session_maker,
    engine,
    init_db,
    close_db,
)

__all__ = [
    "get_session",
    "create_session_maker",
    "engine",
    "init_db",
    "close_db",
]
