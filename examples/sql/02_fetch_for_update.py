"""Fetch a row, change it in Python, and let cursorkit write back the changed fields."""

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

from cursorkit import ConnectionParameters, fetch_for_update, query_as_list


def main() -> None:
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE tickets (id INTEGER PRIMARY KEY, status TEXT, owner TEXT)")
    conn.executemany(
        "INSERT INTO tickets (id, status, owner) VALUES (?, ?, ?)",
        [(1, "open", None), (2, "open", "bob")],
    )
    conn.commit()
    conn.close()

    params = ConnectionParameters(driver="sqlite3", address=db_path)

    try:
        # 1) Claim ticket 1. Only "owner" and "status" differ, so only they are written.
        def _claim(row):
            if row["owner"] is not None:
                return False
            row["owner"] = "alice"
            row["status"] = "in_progress"
            return True

        claimed = fetch_for_update(params, "SELECT * FROM tickets WHERE id = ?", [1], _claim)
        print("Claimed:", claimed)

        # 2) Ticket 2 already has an owner; the updater declines and nothing is written.
        declined = fetch_for_update(params, "SELECT * FROM tickets WHERE id = ?", [2], _claim)
        print("Declined:", declined)

        print("Stored:", query_as_list(params, "SELECT * FROM tickets ORDER BY id"))
    finally:
        os.remove(db_path)


if __name__ == "__main__":
    main()
