"""Public port exports for concrete adapter implementations."""

from .db_api import DbApiConnection, DbApiDriver, Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

__all__ = [
    "DbApiConnection",
    "DbApiDriver",
    "Dialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MySQLDialect",
]
