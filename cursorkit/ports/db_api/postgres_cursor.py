"""Updatable cursor for PostgreSQL connections made with psycopg2.

psycopg2 reports the source table OID and column number of every result
column in `cursor.description`, so the base table is found from the result
metadata. A query is updatable when every result column comes straight from
one table and the result carries that table's primary key.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from .database import DbApiConnection, _close_cursor, _execute
from .dialects import Dialect
from .updatable import UpdatableCursor

_TABLE_NAME_SQL = "SELECT %s::oid::regclass::text"
_COLUMNS_SQL = (
    "SELECT attnum, attname FROM pg_catalog.pg_attribute "
    "WHERE attrelid = %s AND attnum > 0 AND NOT attisdropped"
)
_PRIMARY_KEY_SQL = (
    "SELECT a.attname FROM pg_catalog.pg_index i "
    "JOIN pg_catalog.pg_attribute a ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey) "
    "WHERE i.indrelid = %s AND i.indisprimary"
)


def execute_updatable(
    connection: DbApiConnection,
    sql: str,
    params: Optional[List[Any]],
) -> UpdatableCursor:
    """Execute `sql` and return a cursor that can write rows back."""

    conn = connection._require_open_connection()
    cur = conn.cursor()
    try:
        _execute(cur, sql, params)
        description = list(getattr(cur, "description", None) or ())
        table_oid = _source_table(description)
        table_sql, attnames, primary_key = _catalog(conn, table_oid)
        targets, key = _row_key(connection.dialect, table_sql, description, attnames, primary_key)
        return UpdatableCursor(cur, connection, table_sql, table_sql, targets, key)
    except BaseException:
        _close_cursor(cur)
        raise


def _source_table(description: Sequence[Any]) -> int:
    oids = {getattr(col, "table_oid", None) for col in description}
    if len(oids) != 1 or None in oids:
        raise RuntimeError(
            "result set is not updatable: every column must come from one table"
        )
    return oids.pop()


def _catalog(conn: Any, table_oid: int) -> Tuple[str, Dict[int, str], List[str]]:
    cur = conn.cursor()
    try:
        cur.execute(_TABLE_NAME_SQL, (table_oid,))
        table_sql = cur.fetchone()[0]
        cur.execute(_COLUMNS_SQL, (table_oid,))
        attnames = {int(num): name for num, name in cur.fetchall()}
        cur.execute(_PRIMARY_KEY_SQL, (table_oid,))
        primary_key = [row[0] for row in cur.fetchall()]
    finally:
        _close_cursor(cur)
    return table_sql, attnames, primary_key


def _row_key(
    dialect: Dialect,
    table: str,
    description: Sequence[Any],
    attnames: Dict[int, str],
    primary_key: List[str],
) -> Tuple[Dict[str, str], List[str]]:
    targets: Dict[str, str] = {}
    by_attname: Dict[str, str] = {}
    for col in description:
        name = col[0]
        attname = attnames.get(getattr(col, "table_column", None))
        if attname is None:
            raise RuntimeError(
                f"result set is not updatable: {name!r} is not a column of table {table!r}"
            )
        targets[name] = dialect.q(attname)
        by_attname.setdefault(attname, name)

    if not primary_key:
        raise RuntimeError(f"result set is not updatable: table {table!r} has no primary key")
    missing = [col for col in primary_key if col not in by_attname]
    if missing:
        raise RuntimeError(
            f"result set is not updatable: primary key {missing} of table {table!r} "
            "is not in the result"
        )
    return targets, [by_attname[col] for col in primary_key]
