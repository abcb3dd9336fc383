"""Basic query example: first row, full list, and streaming with early stop."""

from __future__ import annotations

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

from cursorkit import ConnectionParameters, query, query_as_list, query_first


def main() -> None:
    # 1) Prepare a SQLite file with a few rows.
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, email TEXT, age INTEGER)")
    conn.executemany(
        "INSERT INTO users (id, email, age) VALUES (?, ?, ?)",
        [(1, "alice@example.com", 25), (2, "bob@example.com", 30), (3, "carol@example.com", 41)],
    )
    conn.commit()
    conn.close()

    # 2) "sqlite3" resolves to the DB-API module; the address is the database path.
    params = ConnectionParameters(driver="sqlite3", address=db_path)

    try:
        # 3) First row only.
        print("First:", query_first(params, "SELECT * FROM users WHERE age > ? ORDER BY id", [26]))

        # 4) Every row.
        print("All:", query_as_list(params, "SELECT * FROM users ORDER BY id"))

        # 5) Stream rows and stop after the first adult over 28.
        def _print_until_found(row):
            print("Streamed:", row)
            return row["age"] <= 28

        query(params, "SELECT * FROM users ORDER BY id", None, _print_until_found)
    finally:
        os.remove(db_path)


if __name__ == "__main__":
    main()
