"""Domain enums for clearing decisions.

Responsibilities:
  - Define DecisionKind and SkipOption identifiers persisted in clearing storage.
  - Provide stable decision type ids and labels used by legacy callers.

Invariants:
  - Enum values must remain stable for persistence and audits.
  - DecisionKind metadata must be complete and deterministic.
"""

from __future__ import annotations

from enum import Enum

from .errors import UnknownDecisionKind, UnknownSkipOption


class DecisionKind(Enum):
    TO_BE_DISCUSSED = "TO_BE_DISCUSSED"
    IRRELEVANT = "IRRELEVANT"
    IDENTIFIED = "IDENTIFIED"
    DO_NOT_USE = "DO_NOT_USE"
    NON_FUNCTIONAL = "NON_FUNCTIONAL"


class SkipOption(Enum):
    NONE = "none"
    NO_LICENSE = "noLicense"


# Legacy decision type ids and UI labels keyed by kind.
DECISION_METADATA: dict[DecisionKind, dict[str, object]] = {
    DecisionKind.TO_BE_DISCUSSED: {
        "type_id": 3,
        "label": "To be discussed",
    },
    DecisionKind.IRRELEVANT: {
        "type_id": 4,
        "label": "Irrelevant",
    },
    DecisionKind.IDENTIFIED: {
        "type_id": 5,
        "label": "Identified",
    },
    DecisionKind.DO_NOT_USE: {
        "type_id": 6,
        "label": "Do not use",
    },
    DecisionKind.NON_FUNCTIONAL: {
        "type_id": 7,
        "label": "Non-functional",
    },
}


def decision_type_id(kind: DecisionKind) -> int:
    return int(DECISION_METADATA[kind]["type_id"])


def decision_label(kind: DecisionKind) -> str:
    return str(DECISION_METADATA[kind]["label"])


def _normalize_token(raw: str) -> str:
    return raw.strip().upper().replace("-", "_").replace(" ", "_")


_BY_TYPE_ID = {decision_type_id(kind): kind for kind in DecisionKind}
_BY_TOKEN = {kind.name: kind for kind in DecisionKind}
_BY_TOKEN.update({_normalize_token(decision_label(kind)): kind for kind in DecisionKind})


def parse_decision_kind(raw: object) -> DecisionKind:
    """Resolve a caller-supplied decision value to a DecisionKind.

    Accepts a DecisionKind, its persisted value or name (case-insensitive,
    dashes and spaces treated as underscores), its label ("Do not use"),
    or its legacy numeric type id (4 or "4").
    """
    if isinstance(raw, DecisionKind):
        return raw
    if isinstance(raw, bool):
        raise UnknownDecisionKind(raw)
    if isinstance(raw, int):
        kind = _BY_TYPE_ID.get(raw)
        if kind is None:
            raise UnknownDecisionKind(raw)
        return kind
    if isinstance(raw, str):
        stripped = raw.strip()
        if stripped.isdigit():
            kind = _BY_TYPE_ID.get(int(stripped))
        else:
            kind = _BY_TOKEN.get(_normalize_token(stripped))
        if kind is None:
            raise UnknownDecisionKind(raw)
        return kind
    raise UnknownDecisionKind(raw)


def parse_skip_option(raw: object) -> SkipOption:
    if raw is None:
        return SkipOption.NONE
    if isinstance(raw, SkipOption):
        return raw
    if isinstance(raw, str):
        try:
            return SkipOption(raw.strip())
        except ValueError:
            raise UnknownSkipOption(raw) from None
    raise UnknownSkipOption(raw)


_missing = [kind for kind in DecisionKind if kind not in DECISION_METADATA]
if _missing:
    raise RuntimeError(f"Missing DECISION_METADATA for: {[m.value for m in _missing]}")

_extra = [k for k in DECISION_METADATA.keys() if k not in set(DecisionKind)]
if _extra:
    raise RuntimeError(f"Extra DECISION_METADATA keys: {[e.value for e in _extra]}")

if len(_BY_TYPE_ID) != len(DecisionKind):
    raise RuntimeError("DECISION_METADATA type ids must be unique")
