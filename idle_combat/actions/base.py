"""Action proposal — the currency between the rule engine and the executor."""

from __future__ import annotations

from dataclasses import dataclass

from idle_combat.core.abilities import resolve_action
from idle_combat.core.enums import ActionKind


@dataclass(frozen=True, slots=True)
class ActionProposal:
    """An intent selected for this tick.

    The ActionExecutor validates and applies (or rejects) it.
    """

    kind: ActionKind
    ref_id: str | None = None     # ability or aura id
    action: str = ""              # the raw rule action string
    rule_id: str = ""
    reason: str = ""

    @classmethod
    def from_action(cls, action: str, rule_id: str = "", reason: str = "") -> ActionProposal:
        kind, ref_id = resolve_action(action)
        return cls(kind=kind, ref_id=ref_id, action=action, rule_id=rule_id, reason=reason)

    def __repr__(self) -> str:
        return f"Proposal({self.kind.name}, ref={self.ref_id}, rule={self.rule_id!r}, reason={self.reason!r})"
