"""Error hierarchy raised by the query/update engine."""

from __future__ import annotations


class CursorKitError(RuntimeError):
    """Base class for every error raised by the engine."""


class ConfigurationError(CursorKitError, ValueError):
    """Raised when a required connection setting is missing or blank."""


class ConnectionError(CursorKitError):  # noqa: A001
    """Raised when the driver cannot be loaded or the connect call fails."""


class _SqlError(CursorKitError):
    """Error that carries the SQL text it was raised for."""

    prefix = "SQL failed"

    def __init__(self, sql: str, message: str | None = None):
        self.sql = sql
        super().__init__(f"{message or self.prefix}: {sql}")


class StatementError(_SqlError):
    """Raised when preparing or binding a statement fails."""

    prefix = "prepareStatement failed for SQL"


class QueryError(_SqlError):
    """Raised on driver failures while executing, fetching, or writing rows back."""

    prefix = "executeQuery failed for SQL"


class BatchError(_SqlError):
    """Raised when a batch write fails."""

    prefix = "Batch update failed for SQL"


class ProcessingError(CursorKitError):
    """Raised when a row processor or updater raises or returns a non-boolean."""


class TransactionError(CursorKitError):
    """Raised when a unit of work, commit, or rollback fails."""
