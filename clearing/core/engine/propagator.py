"""Decision propagation over a tree subtree.

Responsibilities:
  - Resolve the effective skip option from the rule table.
  - Walk the subtree depth-first and, per eligible node, append a history
    entry, overwrite the current decision and deactivate copyright
    findings when the decision kind says so.
  - Collect per-node store failures into the PropagationResult.

Inputs/Outputs:
  - Inputs: target node id, decision kind, requested skip option and store ports.
  - Outputs: PropagationResult with counts, affected ids and failures.

Invariants:
  - Request errors are raised before any store is touched.
  - Nothing is deleted; findings only ever move from active to inactive.
  - History is appended on every applied node, even when the decision is unchanged.
  - Nodes already written stay written when a later node fails.
"""

from __future__ import annotations

import contextlib
from datetime import datetime, timezone
from typing import Callable, ContextManager, Optional, TypeVar

from ..domain.enums import DecisionKind, SkipOption, parse_decision_kind, parse_skip_option
from ..domain.errors import NodeNotFound, StoreFailure, StoreReadFailure, StoreWriteFailure
from ..policy.rule_table import DEFAULT_RULE_TABLE, DecisionRule, DecisionRuleTable
from .ports import CopyrightStore, DecisionStore, HistoryLog, NodeGuard, TreeStore
from .result import NodeFailure, PropagationResult

_DEBUG_FN: Callable[[str], None] | None = None

T = TypeVar("T")


def set_propagator_debug(fn: Callable[[str], None] | None) -> None:
    global _DEBUG_FN
    _DEBUG_FN = fn


def _debug(msg: str) -> None:
    if _DEBUG_FN is not None:
        _DEBUG_FN(msg)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Unguarded:
    def guard(self, item_id: int) -> ContextManager[None]:
        return contextlib.nullcontext()


def _call_store(
    failure_cls: type[StoreFailure], item_id: int, operation: str, fn: Callable[[], T]
) -> T:
    try:
        return fn()
    except StoreFailure:
        raise
    except Exception as exc:
        raise failure_cls(item_id, operation, str(exc)) from exc


class DecisionPropagator:
    def __init__(
        self,
        tree: TreeStore,
        copyrights: CopyrightStore,
        decisions: DecisionStore,
        history: HistoryLog,
        node_guard: Optional[NodeGuard] = None,
        rule_table: Optional[DecisionRuleTable] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._tree = tree
        self._copyrights = copyrights
        self._decisions = decisions
        self._history = history
        self._node_guard: NodeGuard = node_guard or _Unguarded()
        self._rule_table = rule_table or DEFAULT_RULE_TABLE
        self._now = now or _utc_now

    def apply(
        self,
        target_id: int,
        kind: object,
        requested_skip_option: object = SkipOption.NONE,
    ) -> PropagationResult:
        decision_kind = parse_decision_kind(kind)
        requested = parse_skip_option(requested_skip_option)
        rule = self._rule_table.classify(decision_kind)
        effective = self._rule_table.resolve_skip_option(decision_kind, requested)

        if self._tree.get_item(target_id) is None:
            raise NodeNotFound(target_id)

        _debug(
            "PROPAGATE_START "
            f"target={target_id} kind={decision_kind.value} "
            f"requested_skip={requested.value} effective_skip={effective.value} "
            f"deactivates_copyright={rule.deactivates_copyright}"
        )

        result = PropagationResult(
            target_id=target_id,
            kind=decision_kind,
            requested_skip_option=requested,
            effective_skip_option=effective,
        )

        for item in self._tree.list_subtree(target_id):
            result.visited += 1
            item_id = item.item_id
            try:
                if effective == SkipOption.NO_LICENSE and not self._has_license(item_id):
                    result.skipped_no_license += 1
                    result.skipped_item_ids.append(item_id)
                    _debug(f"SKIP_NO_LICENSE item={item_id}")
                    continue
                with self._node_guard.guard(item_id):
                    deactivated = self._apply_to_node(item_id, decision_kind, rule)
            except StoreFailure as exc:
                result.failures.append(NodeFailure(item_id=item_id, error=exc))
                _debug(f"NODE_FAILED item={item_id} operation={exc.operation} error={exc}")
                continue

            result.mutated += 1
            result.mutated_item_ids.append(item_id)
            result.deactivated_finding_ids.extend(deactivated)
            if deactivated:
                _debug(f"COPYRIGHT_DEACTIVATED item={item_id} findings={deactivated}")

        _debug(
            "PROPAGATE_DONE "
            f"target={target_id} outcome={result.outcome} visited={result.visited} "
            f"mutated={result.mutated} skipped={result.skipped_no_license} "
            f"failed={len(result.failures)}"
        )
        return result

    def _has_license(self, item_id: int) -> bool:
        return _call_store(
            StoreReadFailure,
            item_id,
            "has_detected_license",
            lambda: self._tree.has_detected_license(item_id),
        )

    def _apply_to_node(self, item_id: int, kind: DecisionKind, rule: DecisionRule) -> list[int]:
        timestamp = self._now()
        # History first: a guard without rollback must never leave a current
        # decision that has no history row behind it.
        _call_store(
            StoreWriteFailure,
            item_id,
            "history_append",
            lambda: self._history.append(item_id, kind, timestamp),
        )
        _call_store(
            StoreWriteFailure,
            item_id,
            "set_current_decision",
            lambda: self._decisions.set_current_decision(item_id, kind, timestamp),
        )
        if not rule.deactivates_copyright:
            return []

        findings = _call_store(
            StoreReadFailure,
            item_id,
            "findings_for",
            lambda: self._copyrights.findings_for(item_id),
        )
        deactivated: list[int] = []
        for finding in findings:
            if not finding.active:
                continue
            finding_id = finding.finding_id
            _call_store(
                StoreWriteFailure,
                item_id,
                "set_active",
                lambda: self._copyrights.set_active(finding_id, False),
            )
            deactivated.append(finding_id)
        return deactivated
