"""Decision rule table: behavioral flags per decision kind.

Responsibilities:
  - Map each DecisionKind to whether it deactivates copyright findings and
    whether it applies to items without a detected license.
  - Resolve the effective skip option used for traversal.

Inputs/Outputs:
  - Inputs: a decision kind (any form accepted by parse_decision_kind).
  - Outputs: DecisionRule with independent boolean flags.

Invariants:
  - Pure and deterministic; the default table is immutable and shared.
  - Blanket exclusions apply regardless of detected licenses.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from ..domain.enums import DecisionKind, SkipOption, parse_decision_kind, parse_skip_option


@dataclass(frozen=True)
class DecisionRule:
    deactivates_copyright: bool
    applies_without_license: bool


DECISION_RULES: Mapping[DecisionKind, DecisionRule] = MappingProxyType(
    {
        DecisionKind.IRRELEVANT: DecisionRule(deactivates_copyright=True, applies_without_license=True),
        DecisionKind.DO_NOT_USE: DecisionRule(deactivates_copyright=True, applies_without_license=True),
        DecisionKind.NON_FUNCTIONAL: DecisionRule(deactivates_copyright=True, applies_without_license=True),
        DecisionKind.IDENTIFIED: DecisionRule(deactivates_copyright=False, applies_without_license=False),
        DecisionKind.TO_BE_DISCUSSED: DecisionRule(deactivates_copyright=False, applies_without_license=False),
    }
)


class DecisionRuleTable:
    def __init__(self, rules: Mapping[DecisionKind, DecisionRule]) -> None:
        missing = [kind.value for kind in DecisionKind if kind not in rules]
        if missing:
            raise ValueError(f"rule table is missing kinds: {missing}")
        self._rules: Mapping[DecisionKind, DecisionRule] = MappingProxyType(dict(rules))

    def classify(self, kind: object) -> DecisionRule:
        return self._rules[parse_decision_kind(kind)]

    def resolve_skip_option(self, kind: object, requested: object) -> SkipOption:
        # Parse both before deciding so an invalid request is rejected either way.
        rule = self.classify(kind)
        requested_option = parse_skip_option(requested)
        if rule.applies_without_license:
            return SkipOption.NONE
        return requested_option


DEFAULT_RULE_TABLE = DecisionRuleTable(DECISION_RULES)


def classify(kind: object, table: Optional[DecisionRuleTable] = None) -> DecisionRule:
    return (table or DEFAULT_RULE_TABLE).classify(kind)


def resolve_skip_option(
    kind: object, requested: object, table: Optional[DecisionRuleTable] = None
) -> SkipOption:
    return (table or DEFAULT_RULE_TABLE).resolve_skip_option(kind, requested)
