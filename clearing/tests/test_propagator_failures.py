"""Tests for per-node store failures during propagation."""

from __future__ import annotations

from datetime import datetime, timezone

from clearing.core.domain.enums import DecisionKind
from clearing.core.domain.errors import StoreReadFailure, StoreWriteFailure
from clearing.core.engine.propagator import DecisionPropagator
from clearing.infra.memory.stores import InMemoryClearingStore, KeyedNodeLocks


class _FlakyStore(InMemoryClearingStore):
    def __init__(self, fail_on: dict[str, int]) -> None:
        super().__init__()
        self._fail_on = fail_on

    def _maybe_fail(self, operation: str, item_id: int) -> None:
        if self._fail_on.get(operation) == item_id:
            raise RuntimeError(f"{operation} unavailable")

    def append(self, item_id: int, kind: DecisionKind, timestamp: datetime) -> None:
        self._maybe_fail("append", item_id)
        super().append(item_id, kind, timestamp)

    def has_detected_license(self, item_id: int) -> bool:
        self._maybe_fail("has_detected_license", item_id)
        return super().has_detected_license(item_id)

    def set_active(self, finding_id: int, active: bool) -> None:
        finding = self.get_finding(finding_id)
        if finding is not None:
            self._maybe_fail("set_active", finding.item_id)
        super().set_active(finding_id, active)


def _populate(store: InMemoryClearingStore) -> None:
    store.add_item(1, name="root", is_container=True)
    store.add_item(2, parent_id=1, name="a.c")
    store.add_item(3, parent_id=1, name="b.c")
    store.add_item(4, parent_id=1, name="c.c", licensed=True)
    store.add_finding(20, item_id=2)
    store.add_finding(30, item_id=3)
    store.add_finding(40, item_id=4)


def _propagator(store: InMemoryClearingStore) -> DecisionPropagator:
    return DecisionPropagator(tree=store, copyrights=store, decisions=store, history=store)


def test_history_failure_is_reported_and_traversal_continues() -> None:
    store = _FlakyStore({"append": 3})
    _populate(store)

    result = _propagator(store).apply(1, DecisionKind.IRRELEVANT, "none")

    assert not result.ok
    assert result.outcome == "FAILED"
    assert result.visited == 4
    assert result.mutated == 3
    assert result.mutated_item_ids == [1, 2, 4]
    assert result.failed_item_ids == [3]
    failure = result.failures[0]
    assert isinstance(failure.error, StoreWriteFailure)
    assert failure.error.operation == "history_append"
    assert isinstance(failure.error.__cause__, RuntimeError)
    # Earlier and later nodes stay applied.
    assert store.get_finding(20).active is False
    assert store.get_finding(40).active is False
    assert result.deactivated_finding_ids == [20, 40]
    # Failed before deactivation, so the node's finding is untouched.
    assert store.get_finding(30).active is True
    # No current decision without a matching history row.
    assert store.get_current_decision(3) is None
    assert store.entries_for(3) == []
    assert store.get_current_decision(2).kind == DecisionKind.IRRELEVANT


def test_history_failure_under_node_locks_leaves_decision_unchanged() -> None:
    store = _FlakyStore({"append": 1})
    _populate(store)
    store.set_current_decision(1, DecisionKind.IDENTIFIED, datetime(2024, 1, 1, tzinfo=timezone.utc))
    propagator = DecisionPropagator(
        tree=store,
        copyrights=store,
        decisions=store,
        history=store,
        node_guard=KeyedNodeLocks(),
    )

    result = propagator.apply(1, DecisionKind.IRRELEVANT, "none")

    assert result.failed_item_ids == [1]
    assert store.get_current_decision(1).kind == DecisionKind.IDENTIFIED
    assert store.entries_for(1) == []
    assert result.mutated_item_ids == [2, 3, 4]


def test_license_lookup_failure_is_a_read_failure() -> None:
    store = _FlakyStore({"has_detected_license": 2})
    _populate(store)

    result = _propagator(store).apply(1, DecisionKind.IDENTIFIED, "noLicense")

    assert result.failed_item_ids == [2]
    assert isinstance(result.failures[0].error, StoreReadFailure)
    assert result.failures[0].error.operation == "has_detected_license"
    assert result.mutated_item_ids == [4]
    assert result.skipped_item_ids == [1, 3]


def test_copyright_write_failure_reported_in_dict() -> None:
    store = _FlakyStore({"set_active": 4})
    _populate(store)

    payload = _propagator(store).apply(4, DecisionKind.DO_NOT_USE, "none").to_dict()

    assert payload["outcome"] == "FAILED"
    assert payload["mutated"] == 0
    assert payload["failures"] == [
        {
            "item_id": 4,
            "operation": "set_active",
            "error": "set_active failed for item 4: set_active unavailable",
        }
    ]
