"""Port definitions for stores consumed by the propagation engine.

Responsibilities:
  - Define interface contracts for tree traversal, copyright findings,
    current decisions, history and per-node write exclusion.
Must not:
  - Implement logic; interfaces only.
"""

from __future__ import annotations

from datetime import datetime
from typing import ContextManager, Iterator, Optional, Protocol

from ..domain.enums import DecisionKind
from ..domain.models import ClearingDecision, ClearingHistoryEntry, CopyrightFinding, TreeItem


class TreeStore(Protocol):
    def get_item(self, item_id: int) -> Optional[TreeItem]:
        ...

    def list_subtree(self, item_id: int) -> Iterator[TreeItem]:
        """Yield the item and all descendants in depth-first pre-order."""
        ...

    def has_detected_license(self, item_id: int) -> bool:
        ...


class CopyrightStore(Protocol):
    def findings_for(self, item_id: int) -> list[CopyrightFinding]:
        ...

    def set_active(self, finding_id: int, active: bool) -> None:
        ...


class DecisionStore(Protocol):
    def set_current_decision(self, item_id: int, kind: DecisionKind, decided_at: datetime) -> None:
        ...

    def get_current_decision(self, item_id: int) -> Optional[ClearingDecision]:
        ...


class HistoryLog(Protocol):
    def append(self, item_id: int, kind: DecisionKind, timestamp: datetime) -> None:
        ...

    def entries_for(self, item_id: int) -> list[ClearingHistoryEntry]:
        ...


class NodeGuard(Protocol):
    def guard(self, item_id: int) -> ContextManager[None]:
        """Hold exclusive write access to one node for the duration of the block."""
        ...
