"""Propagation result payload for a single decision application.

Responsibilities:
  - Capture per-run counts, affected ids and per-node failures for audit.

Inputs/Outputs:
  - Inputs: produced by DecisionPropagator.apply.
  - Outputs: dataclass consumed by app/cli layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..domain.enums import DecisionKind, SkipOption
from ..domain.errors import StoreFailure


@dataclass(frozen=True)
class NodeFailure:
    item_id: int
    error: StoreFailure


@dataclass
class PropagationResult:
    target_id: int
    kind: DecisionKind
    requested_skip_option: SkipOption
    effective_skip_option: SkipOption
    visited: int = 0
    mutated: int = 0
    skipped_no_license: int = 0
    mutated_item_ids: list[int] = field(default_factory=list)
    skipped_item_ids: list[int] = field(default_factory=list)
    deactivated_finding_ids: list[int] = field(default_factory=list)
    failures: list[NodeFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def outcome(self) -> str:
        return "SUCCESS" if self.ok else "FAILED"

    @property
    def failed_item_ids(self) -> list[int]:
        return [failure.item_id for failure in self.failures]

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome,
            "target_id": self.target_id,
            "kind": self.kind.value,
            "requested_skip_option": self.requested_skip_option.value,
            "effective_skip_option": self.effective_skip_option.value,
            "visited": self.visited,
            "mutated": self.mutated,
            "skipped_no_license": self.skipped_no_license,
            "mutated_item_ids": list(self.mutated_item_ids),
            "skipped_item_ids": list(self.skipped_item_ids),
            "deactivated_finding_ids": list(self.deactivated_finding_ids),
            "failures": [
                {
                    "item_id": failure.item_id,
                    "operation": failure.error.operation,
                    "error": str(failure.error),
                }
                for failure in self.failures
            ],
        }
