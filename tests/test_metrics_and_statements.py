from __future__ import annotations

import io
import unittest

from cursorkit import BatchError, StatementError, TransactionMetrics
from cursorkit.core.batch import write_batch
from cursorkit.core.statements import bind_parameters, is_stream, prepare_statement
from tests.fake_driver import FakeConnection


class TransactionMetricsTests(unittest.TestCase):
    def test_summary_converts_nanoseconds_to_milliseconds(self) -> None:
        metrics = TransactionMetrics()
        metrics.add_time("commit", 1_500_000)
        metrics.add_time("commit", 500_000)
        metrics.num_update_row_calls = 3

        summary = metrics.summary()

        self.assertEqual(summary["commitTime"], 2.0)
        self.assertEqual(summary["connectionTime"], 0.0)
        self.assertEqual(summary["numUpdateRowCalls"], 3)

    def test_timing_accumulates_even_when_block_raises(self) -> None:
        metrics = TransactionMetrics()
        with self.assertRaises(RuntimeError):
            with metrics.timing("execute_query"):
                raise RuntimeError("boom")
        self.assertGreaterEqual(metrics.execute_query_time_ns, 0)

    def test_unknown_phase_raises(self) -> None:
        metrics = TransactionMetrics()
        with self.assertRaises(ValueError):
            metrics.add_time("fetch", 1)
        with self.assertRaises(ValueError):
            with metrics.timing("fetch"):
                pass


class StatementBindingTests(unittest.TestCase):
    def test_is_stream(self) -> None:
        self.assertTrue(is_stream(b"x"))
        self.assertTrue(is_stream(bytearray(b"x")))
        self.assertTrue(is_stream(io.BytesIO(b"x")))
        self.assertFalse(is_stream("text"))
        self.assertFalse(is_stream(None))
        self.assertFalse(is_stream(42))

    def test_none_values_bind_nothing(self) -> None:
        conn = FakeConnection()
        statement = conn.prepare("select 1")
        bind_parameters(statement, None)
        self.assertEqual(statement.bound, {})

    def test_null_value_is_bound(self) -> None:
        conn = FakeConnection()
        statement = prepare_statement(conn, "select ?", [None])
        self.assertEqual(statement.bound, {1: None})
        self.assertEqual(statement.stream_positions, [])

    def test_prepare_records_metrics(self) -> None:
        conn = FakeConnection()
        metrics = TransactionMetrics()
        prepare_statement(conn, "select ?", [1], updatable=True, metrics=metrics)
        self.assertEqual(metrics.num_prepared_statement_calls, 1)
        self.assertEqual(conn.prepared, [("select ?", True)])

    def test_bind_failure_closes_statement(self) -> None:
        conn = FakeConnection()
        conn.fail_on_bind = True
        with self.assertRaises(StatementError) as ctx:
            prepare_statement(conn, "select ?", [1])
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)
        self.assertEqual(conn.statement_closes, 1)


class WriteBatchTests(unittest.TestCase):
    def test_counts_and_metrics(self) -> None:
        conn = FakeConnection()
        conn.batch_counts = [2, None, -1, 1]
        metrics = TransactionMetrics()

        total = write_batch(conn, "update T set a = ?", [[1], [2], [3], [4]], metrics=metrics)

        self.assertEqual(total, 3)
        self.assertEqual(metrics.num_batch_update_calls, 1)
        self.assertEqual(metrics.num_add_batch_calls, 4)
        self.assertEqual(metrics.num_prepared_statement_calls, 1)
        self.assertEqual(conn.statement_closes, 1)

    def test_generator_parameter_sets_are_consumed(self) -> None:
        conn = FakeConnection()
        total = write_batch(
            conn,
            "insert into T values (?)",
            ([value] for value in range(3)),
            metrics=TransactionMetrics(),
        )
        self.assertEqual(total, 3)
        self.assertEqual(conn.executed_batches, [[[0], [1], [2]]])

    def test_execute_failure_closes_statement(self) -> None:
        conn = FakeConnection()
        conn.fail_on_batch = True
        with self.assertRaises(BatchError) as ctx:
            write_batch(conn, "insert into T values (?)", [[1]], metrics=TransactionMetrics())
        self.assertEqual(ctx.exception.sql, "insert into T values (?)")
        self.assertEqual(conn.statement_closes, 1)

    def test_prepare_failure_raises_statement_error(self) -> None:
        conn = FakeConnection()
        conn.fail_on_prepare = True
        with self.assertRaises(StatementError):
            write_batch(conn, "insert into T values (?)", [[1]], metrics=TransactionMetrics())


if __name__ == "__main__":
    unittest.main()
