"""Per-node SQLite transactions used as the propagator's node guard.

Each node's decision, history and copyright writes commit together; a
failure rolls back that node only. Requires a connection in autocommit
mode (see db.get_connection).
"""

from __future__ import annotations

import contextlib
import sqlite3
from typing import Iterator

from clearing.core.domain.errors import StoreWriteFailure


class SqliteNodeTransaction:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @contextlib.contextmanager
    def guard(self, item_id: int) -> Iterator[None]:
        try:
            self._conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as exc:
            raise StoreWriteFailure(item_id, "begin", str(exc)) from exc
        try:
            yield
        except BaseException:
            self._conn.rollback()
            raise
        try:
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise StoreWriteFailure(item_id, "commit", str(exc)) from exc
