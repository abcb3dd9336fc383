"""Transaction wrapper binding several engine calls to one connection."""

from __future__ import annotations

import contextlib
import logging
import time
from typing import Any, Callable, Iterator, List, Optional

from ._resources import release
from .batch import write_batch
from .contracts import ConnectionPort
from .errors import BatchError, TransactionError
from .metrics import TransactionMetrics
from .params import ConnectionParameters
from .provisioner import open_connection
from .streamer import stream_rows
from .types import MaybeRow, ParamSets, ParamValues, Row, RowProcessor, RowUpdater, Rows, TimingSummary

logger = logging.getLogger(__name__)


class Transaction:
    """Session that shares one connection and one commit decision across calls."""

    def __init__(self, connection: ConnectionPort, metrics: Optional[TransactionMetrics] = None):
        if connection is None:
            raise ValueError("no connection")
        self._connection: Optional[ConnectionPort] = connection
        self._uncommitted_changes = False
        self.metrics = metrics if metrics is not None else TransactionMetrics()

    @classmethod
    def open(cls, params: ConnectionParameters) -> Transaction:
        """Acquire a connection for `params` and record the time it took."""

        start = time.perf_counter_ns()
        connection = open_connection(params)
        txn = cls(connection)
        txn.metrics.add_time("connection", time.perf_counter_ns() - start)
        return txn

    @property
    def has_uncommitted_changes(self) -> bool:
        return self._uncommitted_changes

    @property
    def closed(self) -> bool:
        return self._connection is None

    def _require_open_connection(self) -> ConnectionPort:
        if self._connection is None:
            raise TransactionError("transaction is closed")
        return self._connection

    def _mark_uncommitted(self) -> None:
        self._uncommitted_changes = True

    def commit(self) -> None:
        """Commit when there are uncommitted changes, otherwise do nothing."""

        if not self._uncommitted_changes:
            return
        conn = self._require_open_connection()
        try:
            with self.metrics.timing("commit"):
                conn.commit()
        except Exception as exc:
            raise TransactionError("commit failed") from exc
        self._uncommitted_changes = False
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        """Roll back when there are uncommitted changes, otherwise do nothing."""

        if not self._uncommitted_changes:
            return
        conn = self._require_open_connection()
        try:
            conn.rollback()
        except Exception as exc:
            raise TransactionError("rollback failed") from exc
        self._uncommitted_changes = False

    def abort(self) -> None:
        """Roll back unconditionally, logging instead of raising on failure."""

        conn = self._connection
        self._uncommitted_changes = False
        if conn is None:
            return
        try:
            conn.rollback()
        except Exception:
            logger.warning("Rollback failed while aborting transaction", exc_info=True)

    def close(self) -> None:
        """Close the connection. Later calls do nothing."""

        conn = self._connection
        self._connection = None
        if conn is not None:
            release(conn, "connection")

    def query_first(self, sql: str, values: ParamValues = None) -> MaybeRow:
        """Run `sql` and return the first row, or `None` when there is none."""

        return self._first(sql, values, None)

    def query_as_list(self, sql: str, values: ParamValues = None) -> Rows:
        """Run `sql` and return every row. Memory use grows with the result size."""

        rows: Rows = []

        def _collect(row: Row) -> bool:
            rows.append(row)
            return True

        self.query(sql, values, _collect)
        return rows

    def query(self, sql: str, values: ParamValues, processor: Optional[RowProcessor]) -> None:
        """Stream rows to `processor` until it returns False or rows run out."""

        stream_rows(
            self._require_open_connection(),
            sql,
            values,
            processor,
            metrics=self.metrics,
        )

    def fetch_for_update(
        self,
        sql: str,
        values: ParamValues,
        updater: Optional[RowUpdater],
    ) -> MaybeRow:
        """Fetch the first row, let `updater` change it, and write changes back.

        Only fields whose values differ from the fetched ones are written, and
        only when `updater` returns True. Returns the row as left by `updater`.

        With the DB-API adapter an updater needs a SQLite or PostgreSQL
        (psycopg2) connection, and the query must select columns of a single
        table including its primary key (or the rowid of a SQLite table
        without one). Other queries and dialects raise `StatementError` or
        `QueryError`.
        """

        return self._first(sql, values, updater)

    def batch_update(self, sql: str, param_sets: ParamSets) -> int:
        """Execute `sql` once per parameter list in one batch and return the total count."""

        conn = self._require_open_connection()
        try:
            count = write_batch(conn, sql, param_sets, metrics=self.metrics)
        except BatchError:
            # the driver may have applied part of the batch
            self._mark_uncommitted()
            raise
        self._mark_uncommitted()
        return count

    def _first(self, sql: str, values: ParamValues, updater: Optional[RowUpdater]) -> MaybeRow:
        rows: List[Row] = []

        def _take_first(row: Row) -> bool:
            rows.append(row)
            return False

        stream_rows(
            self._require_open_connection(),
            sql,
            values,
            _take_first,
            updater,
            metrics=self.metrics,
            on_update=self._mark_uncommitted,
        )
        return rows[0] if rows else None


@contextlib.contextmanager
def transaction(params: ConnectionParameters) -> Iterator[Transaction]:
    """Open a transaction that commits on success and rolls back on error.

    Errors raised inside the block are re-raised unchanged after an
    unconditional rollback. The connection is always closed.
    """

    txn = Transaction.open(params)
    try:
        yield txn
        txn.commit()
    except BaseException:
        txn.abort()
        raise
    finally:
        txn.close()


def with_transaction(
    params: ConnectionParameters,
    unit_of_work: Callable[[Transaction], Any],
) -> TimingSummary:
    """Run `unit_of_work` in a transaction and return its timing summary.

    The unit of work receives the `Transaction` and returns whether to commit.
    A truthy result commits, anything else rolls back. A rollback is always
    attempted during cleanup; it does nothing once the changes are committed.

    Raises:
        ConfigurationError: If connection settings are missing.
        ConnectionError: If the connection cannot be opened.
        TransactionError: If the unit of work, commit, or rollback fails.
    """

    if params is None:
        raise ValueError("no connection parameters")
    if unit_of_work is None:
        raise ValueError("no unit of work")

    txn = Transaction.open(params)
    try:
        try:
            if unit_of_work(txn):
                txn.commit()
            else:
                txn.rollback()
        finally:
            try:
                txn.rollback()
            except TransactionError:
                logger.warning("Cleanup rollback failed", exc_info=True)
        return txn.metrics.summary()
    except TransactionError:
        logger.exception("Transaction failed")
        raise
    except Exception as exc:
        logger.exception("Transaction failed")
        raise TransactionError("unit of work failed") from exc
    finally:
        txn.close()
