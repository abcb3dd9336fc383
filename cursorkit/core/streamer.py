"""Fetch loop that streams rows to a processor, with optional write-back."""

from __future__ import annotations

import contextlib
from types import MappingProxyType
from typing import Any, Callable, Optional, Sequence

from ._resources import release
from .contracts import ConnectionPort, CursorPort
from .differ import changed_fields
from .errors import ProcessingError, QueryError
from .metrics import TransactionMetrics
from .statements import prepare_statement
from .types import ParamValues, Row, RowProcessor, RowUpdater


def stream_rows(
    connection: ConnectionPort,
    sql: str,
    values: ParamValues,
    processor: Optional[RowProcessor],
    updater: Optional[RowUpdater] = None,
    *,
    metrics: TransactionMetrics,
    on_update: Optional[Callable[[], None]] = None,
) -> None:
    """Execute `sql` and hand each row to `processor` until it returns False.

    When `updater` is given the statement is prepared with an updatable cursor.
    The updater may mutate the row in place; when it returns True, every field
    that differs from the snapshot taken at fetch time is written back through
    the cursor and the row update is flushed, after which `on_update` is called.

    Raises:
        StatementError: If the statement cannot be prepared or bound.
        QueryError: On driver failures while executing, fetching, or writing back.
        ProcessingError: If the processor or updater raises or returns a
            non-boolean value.
    """

    metrics.num_execute_query_calls += 1
    statement = prepare_statement(
        connection,
        sql,
        values,
        updatable=updater is not None,
        metrics=metrics,
    )

    with contextlib.ExitStack() as stack:
        stack.callback(release, statement, "statement")
        try:
            with metrics.timing("execute_query"):
                cursor = statement.execute_query()
            stack.callback(release, cursor, "cursor")
            columns = list(cursor.columns)
        except Exception as exc:
            raise QueryError(sql) from exc

        proceed = True
        while proceed:
            record = _fetch(cursor, sql)
            if record is None:
                break
            row: Row = dict(zip(columns, record))
            if updater is not None:
                _apply_updater(cursor, sql, row, updater, metrics, on_update)
            proceed = _process(processor, row)


def _fetch(cursor: CursorPort, sql: str) -> Optional[Sequence[Any]]:
    try:
        return cursor.fetch()
    except Exception as exc:
        raise QueryError(sql) from exc


def _decision(result: Any, *, default: bool, what: str) -> bool:
    if result is None:
        return default
    if not isinstance(result, bool):
        raise ProcessingError(f"{what} returned {type(result).__name__}, expected bool")
    return result


def _process(processor: Optional[RowProcessor], row: Row) -> bool:
    if processor is None:
        return True
    try:
        result = processor(row)
    except Exception as exc:
        raise ProcessingError("Failed to process row") from exc
    return _decision(result, default=True, what="Row processor")


def _apply_updater(
    cursor: CursorPort,
    sql: str,
    row: Row,
    updater: RowUpdater,
    metrics: TransactionMetrics,
    on_update: Optional[Callable[[], None]],
) -> None:
    snapshot = MappingProxyType(dict(row))
    try:
        result = updater(row)
    except Exception as exc:
        raise ProcessingError("Failed to update row") from exc
    if not _decision(result, default=False, what="Row updater"):
        return

    changed = changed_fields(row, snapshot)
    if not changed:
        return

    try:
        for name in changed:
            cursor.update_value(name, row[name])
        metrics.num_update_row_calls += 1
        with metrics.timing("update_row"):
            cursor.update_row()
    except Exception as exc:
        raise QueryError(sql) from exc

    if on_update is not None:
        on_update()
