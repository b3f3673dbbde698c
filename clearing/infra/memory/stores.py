"""In-memory store for tree items, findings, decisions and history.

Implements every engine port; used by tests and embedding callers that
hold the tree in memory.
"""

from __future__ import annotations

import contextlib
import threading
from datetime import datetime
from typing import Iterator, Optional

from clearing.core.domain.enums import DecisionKind
from clearing.core.domain.models import ClearingDecision, ClearingHistoryEntry, CopyrightFinding, TreeItem


class KeyedNodeLocks:
    """One lock per item id, created on first use and dropped once idle."""

    def __init__(self) -> None:
        # item id -> (lock, number of holders and waiters)
        self._locks: dict[int, tuple[threading.Lock, int]] = {}
        self._registry_lock = threading.Lock()

    def _acquire_entry(self, item_id: int) -> threading.Lock:
        with self._registry_lock:
            lock, users = self._locks.get(item_id, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[item_id] = (lock, users + 1)
            return lock

    def _release_entry(self, item_id: int) -> None:
        with self._registry_lock:
            lock, users = self._locks[item_id]
            if users == 1:
                del self._locks[item_id]
            else:
                self._locks[item_id] = (lock, users - 1)

    def active_count(self) -> int:
        with self._registry_lock:
            return len(self._locks)

    @contextlib.contextmanager
    def guard(self, item_id: int) -> Iterator[None]:
        lock = self._acquire_entry(item_id)
        try:
            with lock:
                yield
        finally:
            self._release_entry(item_id)


class InMemoryClearingStore:
    def __init__(self) -> None:
        self._items: dict[int, TreeItem] = {}
        self._children: dict[int, list[int]] = {}
        self._licensed: set[int] = set()
        self._findings: dict[int, CopyrightFinding] = {}
        self._findings_by_item: dict[int, list[int]] = {}
        self._decisions: dict[int, ClearingDecision] = {}
        self._history: dict[int, list[ClearingHistoryEntry]] = {}
        self._history_lock = threading.Lock()

    # tree

    def add_item(
        self,
        item_id: int,
        parent_id: Optional[int] = None,
        name: str = "",
        is_container: bool = False,
        licensed: bool = False,
    ) -> TreeItem:
        if item_id in self._items:
            raise ValueError(f"duplicate item id: {item_id}")
        if parent_id is not None and parent_id not in self._items:
            raise ValueError(f"unknown parent id: {parent_id}")
        item = TreeItem(
            item_id=item_id,
            parent_id=parent_id,
            name=name or str(item_id),
            is_container=is_container,
        )
        self._items[item_id] = item
        self._children[item_id] = []
        if parent_id is not None:
            self._children[parent_id].append(item_id)
        if licensed:
            self._licensed.add(item_id)
        return item

    def get_item(self, item_id: int) -> Optional[TreeItem]:
        return self._items.get(item_id)

    def list_subtree(self, item_id: int) -> Iterator[TreeItem]:
        if item_id not in self._items:
            return
        stack = [item_id]
        while stack:
            current = stack.pop()
            yield self._items[current]
            stack.extend(reversed(self._children[current]))

    def has_detected_license(self, item_id: int) -> bool:
        return item_id in self._licensed

    # copyrights

    def add_finding(self, finding_id: int, item_id: int, content: str = "", active: bool = True) -> CopyrightFinding:
        if item_id not in self._items:
            raise ValueError(f"unknown item id: {item_id}")
        finding = CopyrightFinding(finding_id=finding_id, item_id=item_id, content=content, active=active)
        self._findings[finding_id] = finding
        self._findings_by_item.setdefault(item_id, []).append(finding_id)
        return finding

    def get_finding(self, finding_id: int) -> Optional[CopyrightFinding]:
        return self._findings.get(finding_id)

    def findings_for(self, item_id: int) -> list[CopyrightFinding]:
        return [self._findings[fid] for fid in self._findings_by_item.get(item_id, [])]

    def set_active(self, finding_id: int, active: bool) -> None:
        finding = self._findings.get(finding_id)
        if finding is None:
            raise KeyError(f"unknown copyright finding: {finding_id}")
        finding.active = active

    # decisions

    def set_current_decision(self, item_id: int, kind: DecisionKind, decided_at: datetime) -> None:
        self._decisions[item_id] = ClearingDecision(item_id=item_id, kind=kind, updated_at=decided_at)

    def get_current_decision(self, item_id: int) -> Optional[ClearingDecision]:
        return self._decisions.get(item_id)

    # history

    def append(self, item_id: int, kind: DecisionKind, timestamp: datetime) -> None:
        entry = ClearingHistoryEntry(item_id=item_id, kind=kind, timestamp=timestamp)
        with self._history_lock:
            self._history.setdefault(item_id, []).append(entry)

    def entries_for(self, item_id: int) -> list[ClearingHistoryEntry]:
        return list(self._history.get(item_id, []))
