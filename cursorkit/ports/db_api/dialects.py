"""Concrete SQL dialect implementations for DB-API adapters."""

from __future__ import annotations

from typing import Optional


class Dialect:
    """Base dialect that defines quoting, placeholders, and session setup."""

    name: str = "generic"
    paramstyle: str = "qmark"
    quote_char: str = '"'
    read_committed_sql: Optional[str] = None
    supports_updatable_cursor: bool = False

    def q(self, ident: str) -> str:
        """Quote SQL identifier."""

        escaped = ident.replace(self.quote_char, self.quote_char * 2)
        return f"{self.quote_char}{escaped}{self.quote_char}"

    def placeholder(self, key: str) -> str:
        """Return parameter placeholder for current param style."""

        if self.paramstyle == "named":
            return f":{key}"
        if self.paramstyle == "qmark":
            return "?"
        if self.paramstyle == "format":
            return "%s"
        raise ValueError(f"Unsupported paramstyle: {self.paramstyle}")


class SQLiteDialect(Dialect):
    """SQLite dialect (`?` parameters, updatable cursors, no isolation levels)."""

    name = "sqlite"
    paramstyle = "qmark"
    quote_char = '"'
    supports_updatable_cursor = True


class PostgresDialect(Dialect):
    """PostgreSQL dialect (`%s` positional parameters, updatable cursors with psycopg2)."""

    name = "postgres"
    paramstyle = "format"
    quote_char = '"'
    read_committed_sql = (
        "SET SESSION CHARACTERISTICS AS TRANSACTION ISOLATION LEVEL READ COMMITTED"
    )
    supports_updatable_cursor = True


class MySQLDialect(Dialect):
    """MySQL dialect (`%s` positional parameters)."""

    name = "mysql"
    paramstyle = "format"
    quote_char = "`"
    read_committed_sql = "SET SESSION TRANSACTION ISOLATION LEVEL READ COMMITTED"


def dialect_for_module(module_name: str) -> Dialect:
    """Guess the dialect of a DB-API module from its name."""

    lowered = module_name.lower()
    if "sqlite" in lowered:
        return SQLiteDialect()
    if "psycopg" in lowered or "pg8000" in lowered:
        return PostgresDialect()
    if "mysql" in lowered or "pymysql" in lowered or "mariadb" in lowered:
        return MySQLDialect()
    return Dialect()
