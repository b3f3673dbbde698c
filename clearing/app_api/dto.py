"""DTO definitions for app-level data exchange.

Responsibilities:
  - Define stable, typed structures for app inputs/outputs.
Must not:
  - Implement business logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from clearing.core.domain.enums import DecisionKind, SkipOption

DecisionInput = Union[DecisionKind, str, int]
SkipOptionInput = Union[SkipOption, str, None]


@dataclass(frozen=True)
class ApplyDecisionRequest:
    target_id: int
    decision: DecisionInput
    skip_option: SkipOptionInput = "none"

    def validate(self) -> None:
        if isinstance(self.target_id, bool) or not isinstance(self.target_id, int):
            raise ValueError("target_id must be an integer")
        if self.target_id < 1:
            raise ValueError("target_id must be >= 1")
        if isinstance(self.decision, str) and not self.decision.strip():
            raise ValueError("decision must be non-empty")
