"""Updatable cursor for SQLite connections.

The base table of a query is discovered through the SQLite authorizer hook
while the statement is compiled, so no SQL text is inspected. A query is
updatable when it reads exactly one table, every result column is a column of
that table or its rowid, and the result carries the table's primary key (or
the rowid when no key is declared). Rows are written back by that key.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .database import DbApiConnection, _close_cursor, _execute
from .updatable import UpdatableCursor

_ROWID_NAMES = frozenset({"rowid", "_rowid_", "oid"})


def execute_updatable(
    connection: DbApiConnection,
    sql: str,
    params: Optional[List[Any]],
) -> UpdatableCursor:
    """Execute `sql` and return a cursor that can write rows back."""

    conn = connection._require_open_connection()
    tables: List[str] = []

    def _authorize(action: int, arg1: Any, _arg2: Any, _db: Any, trigger: Any) -> int:
        if (
            action == sqlite3.SQLITE_READ
            and arg1
            and trigger is None
            and not arg1.startswith("sqlite_")
            and arg1 not in tables
        ):
            tables.append(arg1)
        return sqlite3.SQLITE_OK

    cur = conn.cursor()
    try:
        conn.set_authorizer(_authorize)
        try:
            _execute(cur, sql, params)
        finally:
            conn.set_authorizer(None)
        table = _resolve_table(connection, sql, tables)
        columns = [d[0] for d in getattr(cur, "description", None) or ()]
        targets, key = _row_key(connection, table, columns)
        return UpdatableCursor(cur, connection, table, connection.dialect.q(table), targets, key)
    except BaseException:
        _close_cursor(cur)
        raise


def _resolve_table(connection: DbApiConnection, sql: str, tables: List[str]) -> str:
    if len(tables) == 1:
        connection.update_targets[sql] = tables[0]
        return tables[0]
    if not tables and sql in connection.update_targets:
        # cached statements are not recompiled, so the hook may stay silent
        return connection.update_targets[sql]
    raise RuntimeError(
        f"result set is not updatable: query must read exactly one table, found {tables}"
    )


def _table_info(connection: DbApiConnection, table: str) -> Tuple[Dict[str, str], List[str]]:
    """Return declared column names keyed by lower-cased name, and the primary key in key order."""

    conn = connection._require_open_connection()
    cur = conn.cursor()
    try:
        cur.execute(f"PRAGMA table_info({connection.dialect.q(table)})")
        infos = cur.fetchall()
    finally:
        _close_cursor(cur)
    names = {info[1].lower(): info[1] for info in infos}
    primary_key = [info[1] for info in sorted((i for i in infos if i[5]), key=lambda i: i[5])]
    return names, primary_key


def _row_key(
    connection: DbApiConnection,
    table: str,
    columns: Sequence[str],
) -> Tuple[Dict[str, str], List[str]]:
    names, primary_key = _table_info(connection, table)
    d = connection.dialect

    targets: Dict[str, str] = {}
    by_declared: Dict[str, str] = {}
    for name in columns:
        declared = names.get(name.lower())
        if declared is not None:
            targets[name] = d.q(declared)
            by_declared.setdefault(declared, name)
        elif name.lower() in _ROWID_NAMES:
            targets[name] = "rowid"
        else:
            raise RuntimeError(
                f"result set is not updatable: {name!r} is not a column of table {table!r}"
            )

    if primary_key and all(col in by_declared for col in primary_key):
        return targets, [by_declared[col] for col in primary_key]
    rowid = [name for name in columns if targets[name] == "rowid"]
    if rowid:
        return targets, rowid[:1]
    if primary_key:
        raise RuntimeError(
            f"result set is not updatable: primary key {primary_key} of table {table!r} "
            "is not in the result"
        )
    raise RuntimeError(
        f"result set is not updatable: table {table!r} has no primary key and the result has no rowid"
    )
