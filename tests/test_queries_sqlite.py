from __future__ import annotations

import os
import sqlite3
import tempfile
import unittest

from cursorkit import (
    BatchError,
    ConnectionParameters,
    DbApiDriver,
    QueryError,
    SQLiteDialect,
    TransactionError,
    batch_update,
    fetch_for_update,
    query,
    query_as_list,
    query_first,
    register_driver,
    unregister_driver,
    with_transaction,
)

PARAMS = ConnectionParameters("test", "mem://t1")


class SQLiteQueriesTests(unittest.TestCase):
    def setUp(self) -> None:
        fd, self.db_path = tempfile.mkstemp(prefix="cursorkit_", suffix=".db")
        os.close(fd)
        self.addCleanup(os.remove, self.db_path)

        conn = sqlite3.connect(self.db_path)
        conn.execute("CREATE TABLE T (id INTEGER PRIMARY KEY, name TEXT)")
        conn.executemany("INSERT INTO T (id, name) VALUES (?, ?)", [(1, "a"), (2, "b")])
        conn.commit()
        conn.close()

        db_path = self.db_path
        driver = DbApiDriver(lambda _address, **_props: sqlite3.connect(db_path), SQLiteDialect(), name="test")
        register_driver("test", driver)
        self.addCleanup(unregister_driver, "test")

    def _rows(self) -> list[tuple]:
        conn = sqlite3.connect(self.db_path)
        try:
            return conn.execute("SELECT id, name FROM T ORDER BY id").fetchall()
        finally:
            conn.close()

    def test_query_first(self) -> None:
        self.assertEqual(query_first(PARAMS, "SELECT * FROM T WHERE id = ?", [2]), {"id": 2, "name": "b"})
        self.assertIsNone(query_first(PARAMS, "SELECT * FROM T WHERE id = ?", [99]))

    def test_query_as_list(self) -> None:
        rows = query_as_list(PARAMS, "SELECT * FROM T ORDER BY id", [])
        self.assertEqual(rows, [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])

    def test_query_stops_when_processor_returns_false(self) -> None:
        seen = []

        def _processor(row):
            seen.append(row["id"])
            return False

        query(PARAMS, "SELECT * FROM T ORDER BY id", None, _processor)
        self.assertEqual(seen, [1])

    def test_fetch_for_update_persists_change(self) -> None:
        def _updater(row):
            row["name"] = "B"
            return True

        row = fetch_for_update(PARAMS, "SELECT * FROM T WHERE id = ?", [2], _updater)

        self.assertEqual(row, {"id": 2, "name": "B"})
        self.assertEqual(self._rows(), [(1, "a"), (2, "B")])

    def test_fetch_for_update_without_approval_writes_nothing(self) -> None:
        def _updater(row):
            row["name"] = "B"
            return False

        row = fetch_for_update(PARAMS, "SELECT * FROM T WHERE id = ?", [2], _updater)

        self.assertEqual(row["name"], "B")
        self.assertEqual(self._rows(), [(1, "a"), (2, "b")])

    def test_fetch_for_update_changes_only_the_fetched_row(self) -> None:
        batch_update(PARAMS, "UPDATE T SET name = ?", [["b"]])

        def _updater(row):
            row["name"] = "X"
            return True

        fetch_for_update(PARAMS, "SELECT id, name FROM T WHERE id = ?", [2], _updater)
        self.assertEqual(self._rows(), [(1, "b"), (2, "X")])

    def test_fetch_for_update_without_key_column_raises_query_error(self) -> None:
        batch_update(PARAMS, "UPDATE T SET name = ?", [["b"]])

        def _updater(row):
            row["name"] = "X"
            return True

        with self.assertRaises(QueryError):
            fetch_for_update(PARAMS, "SELECT name FROM T WHERE id = ?", [2], _updater)
        self.assertEqual(self._rows(), [(1, "b"), (2, "b")])

    def test_fetch_for_update_on_computed_column_raises_query_error(self) -> None:
        with self.assertRaises(QueryError):
            fetch_for_update(
                PARAMS,
                "SELECT id, upper(name) AS label FROM T",
                None,
                lambda row: True,
            )
        self.assertEqual(self._rows(), [(1, "a"), (2, "b")])

    def test_batch_update_inserts_rows(self) -> None:
        count = batch_update(
            PARAMS,
            "INSERT INTO T (id, name) VALUES (?, ?)",
            [[3, "c"], [4, "d"], [5, "e"]],
        )
        self.assertEqual(count, 3)
        self.assertEqual(len(self._rows()), 5)

    def test_failed_batch_is_rolled_back(self) -> None:
        with self.assertRaises(BatchError):
            batch_update(
                PARAMS,
                "INSERT INTO T (id, name) VALUES (?, ?)",
                [[3, "c"], [1, "dup"]],
            )
        self.assertEqual(self._rows(), [(1, "a"), (2, "b")])

    def test_with_transaction_commits_several_operations(self) -> None:
        def _work(txn):
            txn.batch_update("INSERT INTO T (id, name) VALUES (?, ?)", [[3, "c"]])
            txn.fetch_for_update("SELECT * FROM T WHERE id = ?", [1], lambda row: row.update(name="A") or True)
            return txn.query_first("SELECT COUNT(*) AS n FROM T")["n"] == 3

        summary = with_transaction(PARAMS, _work)

        self.assertEqual(self._rows(), [(1, "A"), (2, "b"), (3, "c")])
        self.assertEqual(summary["numBatchUpdateCalls"], 1)
        self.assertEqual(summary["numUpdateRowCalls"], 1)
        self.assertEqual(summary["numExecuteQueryCalls"], 2)

    def test_with_transaction_rolls_back_on_false(self) -> None:
        def _work(txn):
            txn.batch_update("INSERT INTO T (id, name) VALUES (?, ?)", [[3, "c"]])
            return False

        with_transaction(PARAMS, _work)
        self.assertEqual(self._rows(), [(1, "a"), (2, "b")])

    def test_with_transaction_rolls_back_on_error(self) -> None:
        def _work(txn):
            txn.batch_update("INSERT INTO T (id, name) VALUES (?, ?)", [[3, "c"]])
            raise RuntimeError("boom")

        with self.assertLogs("cursorkit.core.transaction", level="ERROR"):
            with self.assertRaises(TransactionError):
                with_transaction(PARAMS, _work)
        self.assertEqual(self._rows(), [(1, "a"), (2, "b")])


if __name__ == "__main__":
    unittest.main()
