"""Run several operations in one transaction and print its timing summary."""

from __future__ import annotations

import logging
import os
import sqlite3
import sys
import tempfile
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "cursorkit").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cursorkit import ConnectionParameters, TransactionError, query_as_list, with_transaction


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE accounts (id INTEGER PRIMARY KEY, balance INTEGER)")
    conn.executemany("INSERT INTO accounts (id, balance) VALUES (?, ?)", [(1, 100), (2, 50)])
    conn.commit()
    conn.close()

    params = ConnectionParameters(driver="sqlite3", address=db_path)

    try:
        # 1) Move money and log the transfer in one commit.
        def _transfer(txn):
            txn.fetch_for_update(
                "SELECT * FROM accounts WHERE id = ?",
                [1],
                lambda row: row.update(balance=row["balance"] - 30) or True,
            )
            txn.fetch_for_update(
                "SELECT * FROM accounts WHERE id = ?",
                [2],
                lambda row: row.update(balance=row["balance"] + 30) or True,
            )
            total = txn.query_first("SELECT SUM(balance) AS total FROM accounts")["total"]
            return total == 150

        summary = with_transaction(params, _transfer)
        print("Summary:", summary)
        print("Balances:", query_as_list(params, "SELECT * FROM accounts ORDER BY id"))

        # 2) A failing unit of work is rolled back and reported as TransactionError.
        def _broken(txn):
            txn.batch_update("INSERT INTO accounts (id, balance) VALUES (?, ?)", [[3, 10], [1, 0]])
            return True

        try:
            with_transaction(params, _broken)
        except TransactionError as exc:
            print("Rolled back:", exc, "caused by", repr(exc.__cause__))
        print("Balances:", query_as_list(params, "SELECT * FROM accounts ORDER BY id"))
    finally:
        os.remove(db_path)


if __name__ == "__main__":
    main()
