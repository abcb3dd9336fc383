from __future__ import annotations

import importlib
import os
import unittest
from typing import Any

from cursorkit import (
    ConnectionError,
    ConnectionParameters,
    QueryError,
    batch_update,
    fetch_for_update,
    query_as_list,
    query_first,
    with_transaction,
)


def _load_driver() -> Any:
    try:
        return importlib.import_module("psycopg2")
    except ImportError:
        return None


HAS_POSTGRES_DRIVER = _load_driver() is not None


def _params() -> ConnectionParameters:
    host = os.getenv("CURSORKIT_PG_HOST", os.getenv("PGHOST", "localhost"))
    port = os.getenv("CURSORKIT_PG_PORT", os.getenv("PGPORT", "5432"))
    dbname = os.getenv("CURSORKIT_PG_DATABASE", os.getenv("PGDATABASE", "postgres"))
    return ConnectionParameters(
        driver="psycopg2",
        address=f"host={host} port={port} dbname={dbname}",
        user=os.getenv("CURSORKIT_PG_USER", os.getenv("PGUSER", "postgres")),
        password=os.getenv(
            "CURSORKIT_PG_PASSWORD",
            os.getenv("PGPASSWORD", os.getenv("POSTGRES_PASSWORD", "password")),
        ),
    )


@unittest.skipUnless(HAS_POSTGRES_DRIVER, "psycopg2 is not installed")
class PostgresQueriesTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.params = _params()
        try:
            query_first(cls.params, "SELECT 1 AS one")
        except ConnectionError as exc:
            raise unittest.SkipTest(
                f"PostgreSQL is not reachable with configured credentials: {exc}"
            ) from exc

    def setUp(self) -> None:
        def _reset(txn):
            txn.batch_update('DROP TABLE IF EXISTS "cursorkit_t"', [[]])
            txn.batch_update('CREATE TABLE "cursorkit_t" ("id" INTEGER PRIMARY KEY, "name" TEXT)', [[]])
            txn.batch_update(
                'INSERT INTO "cursorkit_t" ("id", "name") VALUES (%s, %s)',
                [[1, "a"], [2, "b"]],
            )
            return True

        with_transaction(self.params, _reset)

    def test_query_and_batch(self) -> None:
        self.assertEqual(
            query_first(self.params, 'SELECT * FROM "cursorkit_t" WHERE "id" = %s', [2]),
            {"id": 2, "name": "b"},
        )

        count = batch_update(
            self.params,
            'UPDATE "cursorkit_t" SET "name" = %s WHERE "id" = %s',
            [["x", 1], ["y", 2]],
        )
        self.assertGreaterEqual(count, 0)

        rows = query_as_list(self.params, 'SELECT "name" FROM "cursorkit_t" ORDER BY "id"', [])
        self.assertEqual([row["name"] for row in rows], ["x", "y"])

    def test_fetch_for_update_writes_back_by_primary_key(self) -> None:
        def _updater(row):
            row["name"] = "B"
            return True

        row = fetch_for_update(
            self.params, 'SELECT "id", "name" FROM "cursorkit_t" WHERE "id" = %s', [2], _updater
        )

        self.assertEqual(row, {"id": 2, "name": "B"})
        rows = query_as_list(self.params, 'SELECT "name" FROM "cursorkit_t" ORDER BY "id"', [])
        self.assertEqual([row["name"] for row in rows], ["a", "B"])

    def test_fetch_for_update_without_key_raises_query_error(self) -> None:
        with self.assertRaises(QueryError):
            fetch_for_update(
                self.params, 'SELECT "name" FROM "cursorkit_t"', None, lambda row: True
            )


if __name__ == "__main__":
    unittest.main()
