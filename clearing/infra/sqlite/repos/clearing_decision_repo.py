"""SQLite repository for the current clearing decision per item.

Responsibilities:
  - Upsert the single current decision row of an item (last write wins).
Must not:
  - Touch clearing history; history is written by ClearingHistoryRepo.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Optional

from clearing.core.domain.enums import DecisionKind, decision_type_id
from clearing.core.domain.models import ClearingDecision


class ClearingDecisionRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def set_current_decision(self, item_id: int, kind: DecisionKind, decided_at: datetime) -> None:
        self._conn.execute(
            """
            INSERT INTO clearing_decision (
                item_id,
                decision_type,
                decision_type_id,
                updated_at
            ) VALUES (?, ?, ?, ?)
            ON CONFLICT(item_id) DO UPDATE SET
                decision_type=excluded.decision_type,
                decision_type_id=excluded.decision_type_id,
                updated_at=excluded.updated_at
            """,
            (item_id, kind.value, decision_type_id(kind), decided_at.isoformat()),
        )

    def get_current_decision(self, item_id: int) -> Optional[ClearingDecision]:
        row = self._conn.execute(
            """
            SELECT item_id, decision_type, updated_at
            FROM clearing_decision
            WHERE item_id = ?
            """,
            (item_id,),
        ).fetchone()
        if row is None:
            return None
        return ClearingDecision(
            item_id=row["item_id"],
            kind=DecisionKind(row["decision_type"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
