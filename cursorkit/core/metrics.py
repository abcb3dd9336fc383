"""Per-transaction timing accumulators and call counters."""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass
from typing import Iterator

from .types import TimingSummary

PHASES = (
    "connection",
    "commit",
    "batch_update",
    "add_batch",
    "execute_query",
    "update_row",
    "prepared_statement",
)

_NS_PER_MS = 1_000_000.0


@dataclass
class TransactionMetrics:
    """Mutable metrics owned by exactly one transaction."""

    connection_time_ns: int = 0
    commit_time_ns: int = 0
    batch_update_time_ns: int = 0
    add_batch_time_ns: int = 0
    execute_query_time_ns: int = 0
    update_row_time_ns: int = 0
    prepared_statement_time_ns: int = 0

    num_batch_update_calls: int = 0
    num_add_batch_calls: int = 0
    num_execute_query_calls: int = 0
    num_update_row_calls: int = 0
    num_prepared_statement_calls: int = 0

    def add_time(self, phase: str, elapsed_ns: int) -> None:
        if phase not in PHASES:
            raise ValueError(f"Unknown timing phase: {phase!r}")
        attr = f"{phase}_time_ns"
        setattr(self, attr, getattr(self, attr) + abs(elapsed_ns))

    @contextlib.contextmanager
    def timing(self, phase: str) -> Iterator[None]:
        """Accumulate the wall time of the wrapped block into `phase`."""

        if phase not in PHASES:
            raise ValueError(f"Unknown timing phase: {phase!r}")
        start = time.perf_counter_ns()
        try:
            yield
        finally:
            self.add_time(phase, time.perf_counter_ns() - start)

    def summary(self) -> TimingSummary:
        """Return durations in milliseconds and call counts keyed by their external names."""

        return {
            "connectionTime": self.connection_time_ns / _NS_PER_MS,
            "commitTime": self.commit_time_ns / _NS_PER_MS,
            "batchUpdateTime": self.batch_update_time_ns / _NS_PER_MS,
            "addBatchTime": self.add_batch_time_ns / _NS_PER_MS,
            "executeQueryTime": self.execute_query_time_ns / _NS_PER_MS,
            "updateRowTime": self.update_row_time_ns / _NS_PER_MS,
            "preparedStatementTime": self.prepared_statement_time_ns / _NS_PER_MS,
            "numBatchUpdateCalls": self.num_batch_update_calls,
            "numAddBatchCalls": self.num_add_batch_calls,
            "numExecuteQueryCalls": self.num_execute_query_calls,
            "numUpdateRowCalls": self.num_update_row_calls,
            "numPreparedStatementCalls": self.num_prepared_statement_calls,
        }
