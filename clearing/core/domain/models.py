"""Domain models for tree items, findings and clearing decisions.

Responsibilities:
  - Define data carriers for tree nodes, copyright findings, current
    decisions and history entries.

Inputs/Outputs:
  - Produced and consumed by store ports and the propagator.

Invariants:
  - Models carry no behavior beyond trivial derived properties.
  - ClearingHistoryEntry is immutable; history is append-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import DecisionKind


@dataclass(frozen=True)
class TreeItem:
    item_id: int
    parent_id: Optional[int]
    name: str
    is_container: bool = False


@dataclass
class CopyrightFinding:
    finding_id: int
    item_id: int
    content: str = ""
    active: bool = True


@dataclass
class ClearingDecision:
    item_id: int
    kind: DecisionKind
    updated_at: datetime


@dataclass(frozen=True)
class ClearingHistoryEntry:
    item_id: int
    kind: DecisionKind
    timestamp: datetime
