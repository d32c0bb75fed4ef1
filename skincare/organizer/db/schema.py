"""Database schema for the key-value store."""

from __future__ import annotations

import sqlite3
from pathlib import Path

# Record schema versions live in the storage keys, not in a table.
_DDL = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
);
"""


def ensure_schema(db_path: str | Path) -> sqlite3.Connection:
    """Open (or create) the database and create the ``kv_store`` table.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        An open sqlite3.Connection in WAL mode.
    """
    db_path = Path(db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.executescript(_DDL)
    conn.commit()
    return conn
