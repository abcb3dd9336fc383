"""Load connection parameters from a dotenv-style settings file."""

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

from cursorkit import ConfigurationError, load_connection_parameters, query_first, with_transaction


def main() -> None:
    workdir = Path(tempfile.mkdtemp())
    db_path = workdir / "app.db"
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE notes (body TEXT)")
    conn.close()

    # 1) Write a settings file. PROPERTY_* entries become driver keyword arguments.
    settings = workdir / "cursorkit.env"
    settings.write_text(
        "CURSORKIT_DRIVER=sqlite3\n"
        f"CURSORKIT_ADDRESS={db_path}\n"
        "CURSORKIT_PROPERTY_isolation_level=DEFERRED\n"
    )

    try:
        params = load_connection_parameters(settings)
        print("Loaded:", params)

        # 2) Write through the engine and read it back.
        summary = with_transaction(
            params,
            lambda txn: txn.batch_update("INSERT INTO notes (body) VALUES (?)", [["hello"], ["world"]]) == 2,
        )
        print("Inserted with", summary["numAddBatchCalls"], "batch entries")
        print("First note:", query_first(params, "SELECT * FROM notes"))

        # 3) Missing files are reported as configuration errors.
        try:
            load_connection_parameters(workdir / "missing.env")
        except ConfigurationError as exc:
            print("Expected error:", exc)
    finally:
        for path in workdir.iterdir():
            os.remove(path)
        workdir.rmdir()


if __name__ == "__main__":
    main()
