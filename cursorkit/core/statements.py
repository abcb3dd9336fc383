"""Statement preparation and positional parameter binding."""

from __future__ import annotations

import time
from typing import Any, Optional

from ._resources import release
from .contracts import ConnectionPort, StatementPort
from .errors import StatementError
from .metrics import TransactionMetrics
from .types import ParamValues


def is_stream(value: Any) -> bool:
    """Return True for values that must use the streaming bind path."""

    if isinstance(value, (bytes, bytearray, memoryview)):
        return True
    return callable(getattr(value, "read", None))


def bind_parameters(statement: StatementPort, values: ParamValues) -> None:
    """Bind `values` 1-based in order."""

    for index, value in enumerate(values or (), start=1):
        if is_stream(value):
            statement.bind_stream(index, value)
        else:
            statement.bind(index, value)


def prepare_statement(
    connection: ConnectionPort,
    sql: str,
    values: ParamValues,
    *,
    updatable: bool = False,
    metrics: Optional[TransactionMetrics] = None,
) -> StatementPort:
    """Prepare a forward-only statement and bind its parameters.

    Args:
        connection: Open connection.
        sql: SQL text in the driver's positional parameter style.
        values: Ordered parameter values, or `None`.
        updatable: Request an updatable cursor instead of a read-only one.
        metrics: Optional metrics receiving prepare time and count.

    Raises:
        StatementError: If preparing or binding fails. The partially prepared
            statement is closed first.
    """

    statement: Optional[StatementPort] = None
    try:
        start = time.perf_counter_ns()
        statement = connection.prepare(sql, updatable=updatable)
        if metrics is not None:
            metrics.add_time("prepared_statement", time.perf_counter_ns() - start)
            metrics.num_prepared_statement_calls += 1
        bind_parameters(statement, values)
        return statement
    except Exception as exc:
        if statement is not None:
            release(statement, "statement")
        raise StatementError(sql) from exc
