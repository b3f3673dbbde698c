"""SQLite reader for the upload tree and its detected licenses.

Responsibilities:
  - Resolve tree items and list subtrees in depth-first order using the
    nested-set bounds (lft, rgt).
  - Report whether an item has at least one detected license.
Must not:
  - Write to any table.
"""

from __future__ import annotations

import sqlite3
from typing import Iterator, Optional

from clearing.core.domain.models import TreeItem


def _row_to_item(row: sqlite3.Row) -> TreeItem:
    return TreeItem(
        item_id=row["item_id"],
        parent_id=row["parent_id"],
        name=row["name"],
        is_container=bool(row["is_container"]),
    )


class UploadTreeReader:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_item(self, item_id: int) -> Optional[TreeItem]:
        row = self._conn.execute(
            """
            SELECT item_id, parent_id, name, is_container
            FROM uploadtree
            WHERE item_id = ?
            """,
            (item_id,),
        ).fetchone()
        if row is None:
            return None
        return _row_to_item(row)

    def get_bounds(self, item_id: int) -> Optional[tuple[int, int]]:
        row = self._conn.execute(
            "SELECT lft, rgt FROM uploadtree WHERE item_id = ?",
            (item_id,),
        ).fetchone()
        if row is None:
            return None
        return row["lft"], row["rgt"]

    def list_subtree(self, item_id: int) -> Iterator[TreeItem]:
        bounds = self.get_bounds(item_id)
        if bounds is None:
            return
        lft, rgt = bounds
        # Materialized up front: node transactions commit on this connection
        # while the caller is still iterating.
        rows = self._conn.execute(
            """
            SELECT item_id, parent_id, name, is_container
            FROM uploadtree
            WHERE lft BETWEEN ? AND ?
            ORDER BY lft
            """,
            (lft, rgt),
        ).fetchall()
        for row in rows:
            yield _row_to_item(row)

    def has_detected_license(self, item_id: int) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM license_finding WHERE item_id = ? LIMIT 1",
            (item_id,),
        ).fetchone()
        return row is not None
