"""Construct a fully wired app instance for applying clearing decisions.

Responsibilities:
  - Assemble SQLite stores, the node guard and the rule table.
Must not:
  - Implement classification or propagation logic; composition only.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from clearing.app_api.facade import ClearingApplication
from clearing.core.engine.propagator import DecisionPropagator, set_propagator_debug
from clearing.core.policy.rule_table import DecisionRuleTable
from clearing.infra.sqlite.node_transaction import SqliteNodeTransaction
from clearing.infra.sqlite.repos.clearing_decision_repo import ClearingDecisionRepo
from clearing.infra.sqlite.repos.clearing_history_repo import ClearingHistoryRepo
from clearing.infra.sqlite.repos.copyright_repo import CopyrightRepo
from clearing.infra.sqlite.repos.upload_tree_reader import UploadTreeReader


def build_clearing_app(
    conn: sqlite3.Connection,
    rule_table: Optional[DecisionRuleTable] = None,
    debug: bool = False,
    **kwargs: Any,
) -> ClearingApplication:
    """
    Composition root: build and wire the propagator with SQLite-backed ports
    and return the application facade.

    debug=True installs `debug_fn` (or a stdout printer) as the process-wide
    propagator debug hook. It stays installed for every later propagation in
    the process, including ones built without debug; callers that enable it
    must reset it with `set_propagator_debug(None)` when done, as the CLIs do.
    """
    now = kwargs.pop("now", None)
    debug_fn = kwargs.pop("debug_fn", None)
    if kwargs:
        raise TypeError(f"unexpected build options: {sorted(kwargs)}")

    if debug:
        set_propagator_debug(debug_fn or (lambda msg: print(f"[debug] {msg}")))

    propagator = DecisionPropagator(
        tree=UploadTreeReader(conn),
        copyrights=CopyrightRepo(conn),
        decisions=ClearingDecisionRepo(conn),
        history=ClearingHistoryRepo(conn),
        node_guard=SqliteNodeTransaction(conn),
        rule_table=rule_table,
        now=now,
    )
    return ClearingApplication(conn=conn, propagator=propagator)
