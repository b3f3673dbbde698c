"""SQLite repository for the append-only clearing history.

Responsibilities:
  - Insert one row per applied decision and read a node's audit trail.
Must not:
  - Update or delete rows; the schema rejects both.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime

from clearing.core.domain.enums import DecisionKind, decision_type_id
from clearing.core.domain.models import ClearingHistoryEntry


class ClearingHistoryRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def append(self, item_id: int, kind: DecisionKind, timestamp: datetime) -> None:
        self._conn.execute(
            """
            INSERT INTO clearing_history (
                item_id,
                decision_type,
                decision_type_id,
                date_added
            ) VALUES (?, ?, ?, ?)
            """,
            (item_id, kind.value, decision_type_id(kind), timestamp.isoformat()),
        )

    def entries_for(self, item_id: int) -> list[ClearingHistoryEntry]:
        rows = self._conn.execute(
            """
            SELECT item_id, decision_type, date_added
            FROM clearing_history
            WHERE item_id = ?
            ORDER BY history_id
            """,
            (item_id,),
        ).fetchall()
        return [
            ClearingHistoryEntry(
                item_id=row["item_id"],
                kind=DecisionKind(row["decision_type"]),
                timestamp=datetime.fromisoformat(row["date_added"]),
            )
            for row in rows
        ]
