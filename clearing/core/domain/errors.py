"""Typed errors raised by the clearing engine.

Request errors (unknown decision kind or skip option, missing node) are
raised before any store is touched. Store failures are raised per node and
collected by the propagator into the PropagationResult.
"""

from __future__ import annotations


class ClearingError(Exception):
    pass


class UnknownDecisionKind(ClearingError, ValueError):
    def __init__(self, value: object) -> None:
        super().__init__(f"unknown decision kind: {value!r}")
        self.value = value


class UnknownSkipOption(ClearingError, ValueError):
    def __init__(self, value: object) -> None:
        super().__init__(f"unknown skip option: {value!r} (expected 'none' or 'noLicense')")
        self.value = value


class NodeNotFound(ClearingError, LookupError):
    def __init__(self, item_id: int) -> None:
        super().__init__(f"tree node not found: {item_id}")
        self.item_id = item_id


class StoreFailure(ClearingError, RuntimeError):
    def __init__(self, item_id: int, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed for item {item_id}: {message}")
        self.item_id = item_id
        self.operation = operation


class StoreWriteFailure(StoreFailure):
    pass


class StoreReadFailure(StoreFailure):
    pass
