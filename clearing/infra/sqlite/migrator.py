"""SQLite schema migrations for the clearing tables.

Responsibilities:
  - Create the tree, finding, decision and history tables in file order.
Must not:
  - Embed business logic; migrations only.

Every migration is written with IF NOT EXISTS so reapplying is a no-op.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def apply_migrations(conn: sqlite3.Connection) -> list[str]:
    applied: list[str] = []
    for migration in sorted(MIGRATIONS_DIR.glob("*.sql")):
        conn.executescript(migration.read_text(encoding="utf-8"))
        applied.append(migration.name)
    return applied
