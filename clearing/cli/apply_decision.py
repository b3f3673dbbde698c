"""Apply a clearing decision to a tree node and its subtree.

Purpose:
  - Classify the decision, propagate it over the subtree and report counts.
Inputs:
  - CLI args for DB path, target item id, decision and skip option.
Outputs:
  - Writes clearing_decision / clearing_history / copyright rows and prints
    the propagation result to stdout.
Example:
  - PYTHONPATH=. python3 clearing/cli/apply_decision.py --db clearing.db --target 123 --decision Irrelevant --skip-option noLicense
Exit status:
  - 0 success, 1 failed outcome (some nodes failed), 2 rejected request.
Debug:
  - --debug prints engine diagnostics.
"""

from __future__ import annotations

import argparse
import json
import os
import sys

from clearing.app_api.dto import ApplyDecisionRequest
from clearing.app_api.factories import build_clearing_app
from clearing.cli._debug_utils import _dbg, _debug_enabled
from clearing.core.domain.enums import SkipOption
from clearing.core.domain.errors import NodeNotFound
from clearing.core.engine.propagator import set_propagator_debug
from clearing.core.engine.result import PropagationResult
from clearing.infra.sqlite.db import get_connection
from clearing.infra.sqlite.migrator import apply_migrations

DEFAULT_DB = os.environ.get("CLEARING_DB", "clearing.db")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply a clearing decision to a tree node")
    parser.add_argument("--db", default=DEFAULT_DB, help="Path to clearing sqlite db")
    parser.add_argument("--target", type=int, required=True, help="Target item id (directory or file)")
    parser.add_argument(
        "--decision",
        required=True,
        help="Decision kind: name (IRRELEVANT), label ('Do not use') or type id (4)",
    )
    parser.add_argument(
        "--skip-option",
        choices=[option.value for option in SkipOption],
        default=SkipOption.NONE.value,
        help="Requested skip option; ignored for blanket-exclusion decisions",
    )
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    return parser.parse_args(argv)


def print_result(result: PropagationResult) -> None:
    print(f"TARGET={result.target_id} DECISION={result.kind.value}")
    print(
        f"SKIP_OPTION requested={result.requested_skip_option.value} "
        f"effective={result.effective_skip_option.value}"
    )
    print(f"visited={result.visited} mutated={result.mutated} skipped_no_license={result.skipped_no_license}")
    if result.deactivated_finding_ids:
        ids = ",".join(str(fid) for fid in result.deactivated_finding_ids)
        print(f"deactivated_copyrights={ids}")
    for failure in result.failures:
        print(f"FAILED item={failure.item_id} operation={failure.error.operation}: {failure.error}")
    print(f"OUTCOME: {result.outcome}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    conn = get_connection(args.db)
    try:
        apply_migrations(conn)
        app = build_clearing_app(conn, debug=_debug_enabled(args))
        _dbg(args, f"db={args.db} target={args.target} decision={args.decision!r}")

        request = ApplyDecisionRequest(
            target_id=args.target,
            decision=args.decision,
            skip_option=args.skip_option,
        )
        try:
            result = app.apply_decision(request)
        except (NodeNotFound, ValueError) as exc:
            if args.json:
                print(json.dumps({"outcome": "REJECTED", "error": str(exc)}, ensure_ascii=False))
            else:
                print(f"ERROR: {exc}")
            return 2

        if args.json:
            print(json.dumps(result.to_dict(), ensure_ascii=False))
        else:
            print_result(result)
        return 0 if result.ok else 1
    finally:
        if _debug_enabled(args):
            set_propagator_debug(None)
        conn.close()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
