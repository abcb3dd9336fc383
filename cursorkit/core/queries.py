"""One-shot operations that each run on their own connection."""

from __future__ import annotations

from typing import Optional

from .params import ConnectionParameters
from .transaction import transaction
from .types import MaybeRow, ParamSets, ParamValues, RowProcessor, RowUpdater, Rows


def query_first(params: ConnectionParameters, sql: str, values: ParamValues = None) -> MaybeRow:
    """Connect, run `sql`, and return the first row or `None`."""

    with transaction(params) as txn:
        return txn.query_first(sql, values)


def query_as_list(params: ConnectionParameters, sql: str, values: ParamValues = None) -> Rows:
    """Connect, run `sql`, and return all rows in cursor order."""

    with transaction(params) as txn:
        return txn.query_as_list(sql, values)


def query(
    params: ConnectionParameters,
    sql: str,
    values: ParamValues,
    processor: Optional[RowProcessor],
) -> None:
    """Connect, run `sql`, and stream rows to `processor` until it returns False."""

    with transaction(params) as txn:
        txn.query(sql, values, processor)


def fetch_for_update(
    params: ConnectionParameters,
    sql: str,
    values: ParamValues,
    updater: Optional[RowUpdater],
) -> MaybeRow:
    """Connect, fetch the first row, apply `updater`, and commit any write-back.

    See `Transaction.fetch_for_update` for the queries and drivers that can
    write rows back.
    """

    with transaction(params) as txn:
        return txn.fetch_for_update(sql, values, updater)


def batch_update(params: ConnectionParameters, sql: str, param_sets: ParamSets) -> int:
    """Connect, run one batch, and commit it.

    On failure the connection is rolled back and closed before the error
    propagates.
    """

    with transaction(params) as txn:
        return txn.batch_update(sql, param_sets)
