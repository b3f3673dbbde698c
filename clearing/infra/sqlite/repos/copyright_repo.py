"""SQLite repository for copyright findings."""

from __future__ import annotations

import sqlite3

from clearing.core.domain.models import CopyrightFinding


class CopyrightRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def findings_for(self, item_id: int) -> list[CopyrightFinding]:
        rows = self._conn.execute(
            """
            SELECT copyright_id, item_id, content, is_enabled
            FROM copyright
            WHERE item_id = ?
            ORDER BY copyright_id
            """,
            (item_id,),
        ).fetchall()
        return [
            CopyrightFinding(
                finding_id=row["copyright_id"],
                item_id=row["item_id"],
                content=row["content"],
                active=bool(row["is_enabled"]),
            )
            for row in rows
        ]

    def set_active(self, finding_id: int, active: bool) -> None:
        cursor = self._conn.execute(
            "UPDATE copyright SET is_enabled = ? WHERE copyright_id = ?",
            (1 if active else 0, finding_id),
        )
        if cursor.rowcount == 0:
            raise LookupError(f"copyright finding not found: {finding_id}")

    def is_active(self, finding_id: int) -> bool | None:
        row = self._conn.execute(
            "SELECT is_enabled FROM copyright WHERE copyright_id = ?",
            (finding_id,),
        ).fetchone()
        if row is None:
            return None
        return bool(row["is_enabled"])
