"""SQLite connection helpers."""

from __future__ import annotations

import sqlite3


def get_connection(db_path: str) -> sqlite3.Connection:
    # Autocommit mode: node transactions issue their own BEGIN/COMMIT.
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_readonly_connection(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
    conn.row_factory = sqlite3.Row
    return conn
