"""Public core API for the query/update engine and transaction control."""

from .contracts import ConnectionPort, CursorPort, DriverPort, StatementPort
from .differ import changed_fields, field_differs
from .drivers import register_driver, resolve_driver, unregister_driver
from .errors import (
    BatchError,
    ConfigurationError,
    ConnectionError,
    CursorKitError,
    ProcessingError,
    QueryError,
    StatementError,
    TransactionError,
)
from .metrics import TransactionMetrics
from .params import ConnectionParameters
from .provisioner import open_connection
from .queries import batch_update, fetch_for_update, query, query_as_list, query_first
from .transaction import Transaction, transaction, with_transaction
from .types import MaybeRow, ParamSets, ParamValues, Row, RowProcessor, RowSnapshot, RowUpdater, Rows

__all__ = [
    "BatchError",
    "ConfigurationError",
    "ConnectionError",
    "ConnectionParameters",
    "ConnectionPort",
    "CursorKitError",
    "CursorPort",
    "DriverPort",
    "MaybeRow",
    "ParamSets",
    "ParamValues",
    "ProcessingError",
    "QueryError",
    "Row",
    "RowProcessor",
    "RowSnapshot",
    "RowUpdater",
    "Rows",
    "StatementError",
    "StatementPort",
    "Transaction",
    "TransactionError",
    "TransactionMetrics",
    "batch_update",
    "changed_fields",
    "fetch_for_update",
    "field_differs",
    "open_connection",
    "query",
    "query_as_list",
    "query_first",
    "register_driver",
    "resolve_driver",
    "transaction",
    "unregister_driver",
    "with_transaction",
]
