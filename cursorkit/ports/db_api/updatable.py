"""Key-addressed updatable cursors for the dialects that support them."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from .database import DbApiConnection, DbApiCursor, _close_cursor


def execute_updatable(
    connection: DbApiConnection,
    sql: str,
    params: Optional[List[Any]],
) -> UpdatableCursor:
    """Execute `sql` with the dialect's updatable-cursor implementation."""

    name = connection.dialect.name
    if name == "sqlite":
        from .sqlite_cursor import execute_updatable as execute_sqlite

        return execute_sqlite(connection, sql, params)
    if name == "postgres":
        from .postgres_cursor import execute_updatable as execute_postgres

        return execute_postgres(connection, sql, params)
    raise RuntimeError(f"{name} connections do not support updatable cursors")


class UpdatableCursor(DbApiCursor):
    """Cursor that buffers column writes for the current row and flushes them by key.

    Args:
        cursor: Executed DB-API cursor.
        connection: Connection the write-back statements run on.
        table: Base table name used in diagnostics.
        table_sql: Base table reference spliced into `UPDATE`.
        targets: Result column name mapped to the SQL reference of its table column.
        key: Result columns that identify exactly one table row.
    """

    def __init__(
        self,
        cursor: Any,
        connection: DbApiConnection,
        table: str,
        table_sql: str,
        targets: Mapping[str, str],
        key: Sequence[str],
    ):
        super().__init__(cursor)
        if not key:
            raise ValueError("an updatable cursor needs at least one key column")
        self._connection = connection
        self.table = table
        self._table_sql = table_sql
        self._targets = dict(targets)
        self.key: List[str] = list(key)
        self._current: Optional[Dict[str, Any]] = None
        self._pending: Dict[str, Any] = {}

    def fetch(self) -> Optional[Sequence[Any]]:
        values = super().fetch()
        self._pending.clear()
        self._current = None if values is None else dict(zip(self.columns, values))
        return values

    def update_value(self, column: str, value: Any) -> None:
        if self._current is None:
            raise RuntimeError("no current row to update")
        if column not in self._targets:
            raise RuntimeError(f"column {column!r} is not in the result set")
        self._pending[column] = value

    def update_row(self) -> None:
        """Write pending values to the table row whose key matches the current row."""

        if self._current is None:
            raise RuntimeError("no current row to update")
        if not self._pending:
            return

        d = self._connection.dialect
        assignments = ", ".join(
            f"{self._targets[name]} = {d.placeholder(name)}" for name in self._pending
        )
        predicate = " AND ".join(
            f"{self._targets[name]} = {d.placeholder(name)}" for name in self.key
        )
        sql = f"UPDATE {self._table_sql} SET {assignments} WHERE {predicate}"
        params = list(self._pending.values()) + [self._current[name] for name in self.key]

        cur = self._connection._require_open_connection().cursor()
        try:
            cur.execute(sql, params)
            count = cur.rowcount
        finally:
            _close_cursor(cur)
        if count != 1:
            raise RuntimeError(
                f"current row of {self.table!r} could not be located for update"
            )

        self._current.update(self._pending)
        self._pending.clear()
