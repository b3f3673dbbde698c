"""SQLite writer for loading an upload tree with nested-set bounds.

Responsibilities:
  - Insert whole trees, computing lft/rgt so subtrees are contiguous ranges.
  - Insert detected licenses and copyright findings for loaded items.
Must not:
  - Write clearing decisions or history.
"""

from __future__ import annotations

import sqlite3
from typing import Iterable, Optional

TreeRow = tuple[int, Optional[int], str, bool]


def compute_nested_bounds(rows: list[TreeRow]) -> dict[int, tuple[int, int]]:
    children: dict[Optional[int], list[int]] = {}
    for item_id, parent_id, _name, _is_container in rows:
        children.setdefault(parent_id, []).append(item_id)

    bounds: dict[int, tuple[int, int]] = {}
    counter = 1
    # Iterative DFS; a node is closed after all of its children.
    for root_id in children.get(None, []):
        stack: list[tuple[int, bool]] = [(root_id, False)]
        opened: dict[int, int] = {}
        while stack:
            item_id, closing = stack.pop()
            if closing:
                bounds[item_id] = (opened[item_id], counter)
                counter += 1
                continue
            opened[item_id] = counter
            counter += 1
            stack.append((item_id, True))
            for child_id in reversed(children.get(item_id, [])):
                stack.append((child_id, False))

    if len(bounds) != len(rows):
        unreachable = sorted(r[0] for r in rows if r[0] not in bounds)
        raise ValueError(f"tree items unreachable from a root: {unreachable}")
    return bounds


class UploadTreeWriter:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def insert_tree(self, rows: Iterable[TreeRow]) -> None:
        row_list = list(rows)
        # New trees are placed after existing ones so ranges never overlap.
        offset = self._conn.execute("SELECT COALESCE(MAX(rgt), 0) FROM uploadtree").fetchone()[0]
        bounds = {
            item_id: (lft + offset, rgt + offset)
            for item_id, (lft, rgt) in compute_nested_bounds(row_list).items()
        }
        ordered = sorted(row_list, key=lambda r: bounds[r[0]][0])
        self._conn.executemany(
            """
            INSERT INTO uploadtree (item_id, parent_id, name, is_container, lft, rgt)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (item_id, parent_id, name, 1 if is_container else 0, *bounds[item_id])
                for item_id, parent_id, name, is_container in ordered
            ],
        )

    def add_license(self, item_id: int, license_shortname: str) -> None:
        self._conn.execute(
            "INSERT INTO license_finding (item_id, license_shortname) VALUES (?, ?)",
            (item_id, license_shortname),
        )

    def add_copyright(self, copyright_id: int, item_id: int, content: str = "", active: bool = True) -> None:
        self._conn.execute(
            "INSERT INTO copyright (copyright_id, item_id, content, is_enabled) VALUES (?, ?, ?, ?)",
            (copyright_id, item_id, content, 1 if active else 0),
        )
