"""DB-API adapter and dialect exports."""

from .database import DbApiConnection, DbApiCursor, DbApiStatement
from .dialects import Dialect, MySQLDialect, PostgresDialect, SQLiteDialect, dialect_for_module
from .driver import DbApiDriver
from .updatable import UpdatableCursor

__all__ = [
    "DbApiConnection",
    "DbApiCursor",
    "DbApiDriver",
    "DbApiStatement",
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "UpdatableCursor",
    "dialect_for_module",
]
