"""DB-API adapter implementation for the core connection port."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from .dialects import Dialect


class DbApiConnection:
    """Thin wrapper that exposes a PEP 249 connection through the connection port."""

    def __init__(self, conn: Any, dialect: Dialect):
        """Create connection adapter.

        Args:
            conn: DB-API connection object.
            dialect: Concrete SQL dialect instance.
        """

        self.conn: Any | None = conn
        self.dialect = dialect
        self._closed = False
        self.update_targets: Dict[str, str] = {}

    def _require_open_connection(self) -> Any:
        if self._closed or self.conn is None:
            raise RuntimeError("connection is closed")
        return self.conn

    def disable_autocommit(self) -> None:
        """Turn autocommit off, whether the driver exposes it as attribute or method."""

        conn = self._require_open_connection()
        autocommit = getattr(conn, "autocommit", None)
        if callable(autocommit):
            autocommit(False)
        elif autocommit is not None:
            conn.autocommit = False

    def set_read_committed(self) -> None:
        """Apply read-committed isolation for the session when the dialect has one."""

        sql = self.dialect.read_committed_sql
        if not sql:
            return
        conn = self._require_open_connection()
        cur = conn.cursor()
        try:
            cur.execute(sql)
        finally:
            _close_cursor(cur)
        conn.commit()

    def prepare(self, sql: str, *, updatable: bool = False) -> DbApiStatement:
        """Create a statement. Updatable statements need dialect support."""

        self._require_open_connection()
        if updatable and not self.dialect.supports_updatable_cursor:
            raise RuntimeError(
                f"{self.dialect.name} connections do not support updatable cursors"
            )
        return DbApiStatement(self, sql, updatable=updatable)

    def commit(self) -> None:
        self._require_open_connection().commit()

    def rollback(self) -> None:
        self._require_open_connection().rollback()

    def close(self) -> None:
        """Close underlying connection. Later calls do nothing."""

        if self._closed:
            return
        conn = self.conn
        self._closed = True
        self.conn = None
        self.update_targets.clear()
        close = getattr(conn, "close", None)
        if callable(close):
            close()


class DbApiStatement:
    """Statement that collects positional bindings until it is executed."""

    def __init__(self, connection: DbApiConnection, sql: str, *, updatable: bool = False):
        self.connection = connection
        self.sql = sql
        self.updatable = updatable
        self._bound: Dict[int, Any] = {}
        self._batch: List[List[Any]] = []
        self._closed = False

    def _require_open(self) -> None:
        if self._closed:
            raise RuntimeError("statement is closed")

    def bind(self, index: int, value: Any) -> None:
        self._require_open()
        if index < 1:
            raise IndexError(f"parameter positions start at 1, got {index}")
        self._bound[index] = value

    def bind_stream(self, index: int, stream: Any) -> None:
        """Bind binary content, reading file-like objects to the end."""

        read = getattr(stream, "read", None)
        data = read() if callable(read) else stream
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.bind(index, bytes(data))

    def _parameters(self) -> Optional[List[Any]]:
        if not self._bound:
            return None
        positions = sorted(self._bound)
        if positions != list(range(1, len(positions) + 1)):
            raise ValueError(f"parameter positions must be contiguous from 1, got {positions}")
        return [self._bound[pos] for pos in positions]

    def execute_query(self) -> DbApiCursor:
        """Execute the statement and return a cursor over its rows."""

        self._require_open()
        conn = self.connection._require_open_connection()
        params = self._parameters()
        if self.updatable:
            from .updatable import execute_updatable

            return execute_updatable(self.connection, self.sql, params)

        cur = conn.cursor()
        try:
            _execute(cur, self.sql, params)
        except BaseException:
            _close_cursor(cur)
            raise
        return DbApiCursor(cur)

    def add_batch(self) -> None:
        """Queue the current bindings as one batch entry and clear them."""

        self._require_open()
        self._batch.append(self._parameters() or [])
        self._bound.clear()

    def execute_batch(self) -> List[Optional[int]]:
        """Run every queued entry with one `executemany` call.

        DB-API reports one aggregate row count, so the result holds a single
        entry, `None` when the driver does not know the count.
        """

        self._require_open()
        if not self._batch:
            return []
        conn = self.connection._require_open_connection()
        cur = conn.cursor()
        try:
            cur.executemany(self.sql, self._batch)
            rowcount = getattr(cur, "rowcount", -1)
        finally:
            _close_cursor(cur)
        self._batch.clear()
        if rowcount is None or rowcount < 0:
            return [None]
        return [rowcount]

    def close(self) -> None:
        self._closed = True
        self._bound.clear()
        self._batch.clear()


class DbApiCursor:
    """Read-only cursor over a DB-API cursor."""

    def __init__(self, cursor: Any):
        self._cursor = cursor
        desc = getattr(cursor, "description", None) or ()
        self.columns: List[str] = [d[0] for d in desc]

    def fetch(self) -> Optional[Sequence[Any]]:
        """Fetch the next row as a sequence in column order, or `None`."""

        if not self.columns:
            return None
        row = self._cursor.fetchone()
        if row is None:
            return None
        return self._row_values(row)

    def _row_values(self, row: Any) -> Sequence[Any]:
        """Normalize row object to a value sequence.

        Supports tuple/list rows directly and mapping rows via `columns`.
        """

        if isinstance(row, (tuple, list)):
            return row
        if isinstance(row, Mapping):
            return [row[name] for name in self.columns]
        try:
            return tuple(row)
        except TypeError:
            pass
        raise TypeError(f"Unsupported row type: {type(row)}")

    def update_value(self, column: str, value: Any) -> None:
        raise RuntimeError("cursor is read-only")

    def update_row(self) -> None:
        raise RuntimeError("cursor is read-only")

    def close(self) -> None:
        _close_cursor(self._cursor)


def _execute(cur: Any, sql: str, params: Optional[List[Any]]) -> None:
    if params is None:
        cur.execute(sql)
    else:
        cur.execute(sql, params)


def _close_cursor(cur: Any) -> None:
    close = getattr(cur, "close", None)
    if callable(close):
        close()
