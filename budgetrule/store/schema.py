"""SQLite schema for the key-value store."""

import sqlite3
from pathlib import Path

from budgetrule.paths import get_db_path

SCHEMA = """
CREATE TABLE IF NOT EXISTS key_values (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
)
"""


def database_exists(db_path: Path | None = None) -> bool:
    """Check whether ``init_database`` has created the file."""
    return (db_path or get_db_path()).exists()


def init_database(db_path: Path | None = None) -> None:
    """Create the database file and the key_values table if missing.

    Running it again keeps existing rows.

    Raises:
        sqlite3.Error: If the schema cannot be created.
    """
    db_path = db_path or get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        conn.execute(SCHEMA)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
