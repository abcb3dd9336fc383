"""Parameterized queries, row streaming, diff-based write-back, and batched writes."""

from .config import load_connection_parameters, parameters_from_mapping
from .core import (
    BatchError,
    ConfigurationError,
    ConnectionError,
    ConnectionParameters,
    CursorKitError,
    ProcessingError,
    QueryError,
    StatementError,
    Transaction,
    TransactionError,
    TransactionMetrics,
    batch_update,
    changed_fields,
    fetch_for_update,
    field_differs,
    query,
    query_as_list,
    query_first,
    register_driver,
    resolve_driver,
    transaction,
    unregister_driver,
    with_transaction,
)
from .ports import DbApiConnection, DbApiDriver, Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

__all__ = [
    "BatchError",
    "ConfigurationError",
    "ConnectionError",
    "ConnectionParameters",
    "CursorKitError",
    "DbApiConnection",
    "DbApiDriver",
    "Dialect",
    "MySQLDialect",
    "PostgresDialect",
    "ProcessingError",
    "QueryError",
    "SQLiteDialect",
    "StatementError",
    "Transaction",
    "TransactionError",
    "TransactionMetrics",
    "batch_update",
    "changed_fields",
    "fetch_for_update",
    "field_differs",
    "load_connection_parameters",
    "parameters_from_mapping",
    "query",
    "query_as_list",
    "query_first",
    "register_driver",
    "resolve_driver",
    "transaction",
    "unregister_driver",
    "with_transaction",
]
