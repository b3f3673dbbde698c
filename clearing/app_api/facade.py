from __future__ import annotations

import sqlite3
from typing import Optional

from clearing.core.domain.models import ClearingDecision, ClearingHistoryEntry
from clearing.core.engine.propagator import DecisionPropagator
from clearing.core.engine.result import PropagationResult
from clearing.infra.sqlite.repos.clearing_decision_repo import ClearingDecisionRepo
from clearing.infra.sqlite.repos.clearing_history_repo import ClearingHistoryRepo
from .dto import ApplyDecisionRequest


class ClearingApplication:
    def __init__(
        self,
        conn: sqlite3.Connection,
        propagator: DecisionPropagator,
    ) -> None:
        self._conn = conn
        self._propagator = propagator
        self._decision_repo = ClearingDecisionRepo(conn)
        self._history_repo = ClearingHistoryRepo(conn)

    def apply_decision(self, request: ApplyDecisionRequest) -> PropagationResult:
        request.validate()
        return self._propagator.apply(
            request.target_id,
            request.decision,
            request.skip_option,
        )

    def current_decision(self, item_id: int) -> Optional[ClearingDecision]:
        return self._decision_repo.get_current_decision(item_id)

    def history_for(self, item_id: int) -> list[ClearingHistoryEntry]:
        return self._history_repo.entries_for(item_id)
