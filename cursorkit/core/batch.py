"""Batched execution of one SQL template against many parameter lists."""

from __future__ import annotations

import contextlib
from typing import Optional, Sequence

from ._resources import release
from .contracts import ConnectionPort
from .errors import BatchError
from .metrics import TransactionMetrics
from .statements import bind_parameters, prepare_statement
from .types import ParamSets


def write_batch(
    connection: ConnectionPort,
    sql: str,
    param_sets: ParamSets,
    *,
    metrics: TransactionMetrics,
) -> int:
    """Queue every parameter list against one statement and execute them together.

    Returns:
        Sum of the per-entry affected-row counts. Entries reported as unknown
        (`None` or negative) count as zero.

    Raises:
        StatementError: If the statement cannot be prepared.
        BatchError: If binding, queueing, or executing the batch fails.
    """

    metrics.num_batch_update_calls += 1
    statement = prepare_statement(connection, sql, None, metrics=metrics)

    with contextlib.ExitStack() as stack:
        stack.callback(release, statement, "statement")
        try:
            for values in param_sets:
                bind_parameters(statement, values)
                metrics.num_add_batch_calls += 1
                with metrics.timing("add_batch"):
                    statement.add_batch()

            with metrics.timing("batch_update"):
                counts = statement.execute_batch()
        except Exception as exc:
            raise BatchError(sql) from exc

    return _total(counts)


def _total(counts: Sequence[Optional[int]]) -> int:
    return sum(count for count in counts if count is not None and count > 0)
