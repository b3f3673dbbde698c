"""Show the current clearing decision and history of a tree node.

Purpose:
  - Print the audit trail recorded by decision propagation.
Inputs:
  - CLI args for DB path and item id.
Outputs:
  - Current decision and history entries (oldest first) to stdout.
Example:
  - PYTHONPATH=. python3 clearing/cli/show_history.py --db clearing.db --item 123
"""

from __future__ import annotations

import argparse
import os
import sqlite3
import sys

from clearing.core.domain.enums import decision_label
from clearing.infra.sqlite.db import get_readonly_connection
from clearing.infra.sqlite.repos.clearing_decision_repo import ClearingDecisionRepo
from clearing.infra.sqlite.repos.clearing_history_repo import ClearingHistoryRepo

DEFAULT_DB = os.environ.get("CLEARING_DB", "clearing.db")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show clearing decision history for an item")
    parser.add_argument("--db", default=DEFAULT_DB, help="Path to clearing sqlite db")
    parser.add_argument("--item", type=int, required=True, help="Item id")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        conn = get_readonly_connection(args.db)
        try:
            decision = ClearingDecisionRepo(conn).get_current_decision(args.item)
            entries = ClearingHistoryRepo(conn).entries_for(args.item)
        finally:
            conn.close()
    except sqlite3.Error as exc:
        print(f"ERROR: cannot read clearing db {args.db}: {exc}")
        return 2

    if decision is None:
        print(f"ITEM={args.item} DECISION=<none>")
    else:
        print(
            f"ITEM={args.item} DECISION={decision.kind.value} "
            f"({decision_label(decision.kind)}) updated_at={decision.updated_at.isoformat()}"
        )
    for entry in entries:
        print(f"  {entry.timestamp.isoformat()} {entry.kind.value}")
    print(f"HISTORY_COUNT={len(entries)}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
