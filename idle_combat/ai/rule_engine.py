"""RuleEngine — picks at most one player action per tick.

Rules are evaluated in ascending priority; the first enabled rule whose
condition holds wins.  Feasibility is folded into the condition so that
an unaffordable or redundant action falls through to the next rule:

  - instant ability: cooldown ready and mana affordable
  - summon ability:  the above, and summon count below the cap
  - aura toggle:     only when toggling would change the aura state
  - melee / none / unknown: the bare HP predicate
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from idle_combat.actions.base import ActionProposal
from idle_combat.core.abilities import ABILITY_REGISTRY
from idle_combat.core.enums import ActionKind, ConditionType
from idle_combat.core.rules import CombatRule, sort_rules

if TYPE_CHECKING:
    from idle_combat.core.combat_state import CombatState

logger = logging.getLogger(__name__)


def hp_predicate(rule: CombatRule, hp_percent: float) -> bool:
    """The raw HP test, without feasibility."""
    match rule.condition_type:
        case ConditionType.HP_BELOW:
            return hp_percent < rule.condition_value
        case ConditionType.HP_ABOVE:
            return hp_percent >= rule.condition_value
        case ConditionType.ALWAYS:
            return True
        case _:
            return False


class RuleEngine:
    """Holds the active rule set, pre-sorted by priority."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[CombatRule] = ()) -> None:
        self._rules: list[CombatRule] = sort_rules(list(rules))

    @property
    def rules(self) -> list[CombatRule]:
        return list(self._rules)

    def load(self, rules: Iterable[CombatRule]) -> None:
        self._rules = sort_rules(list(rules))
        logger.info("Loaded %d rules (%d enabled)", len(self._rules), sum(r.enabled for r in self._rules))

    def is_satisfied(self, rule: CombatRule, state: CombatState) -> bool:
        """HP predicate combined with the feasibility of the rule's action."""
        if rule.condition_type == ConditionType.UNKNOWN:
            return False
        player = state.player
        holds = hp_predicate(rule, player.hp_percent)
        proposal = ActionProposal.from_action(rule.action, rule.rule_id)

        if proposal.kind == ActionKind.TOGGLE_AURA:
            is_active = proposal.ref_id in state.active_auras
            if rule.condition_type == ConditionType.ALWAYS:
                return not is_active
            return holds != is_active

        if not holds:
            return False

        if proposal.kind in (ActionKind.CAST_INSTANT, ActionKind.CAST_SUMMON):
            ability = ABILITY_REGISTRY.get(proposal.ref_id or "")
            if ability is None:
                return False
            if not state.timers.ability_ready(ability.ability_id):
                return False
            if player.mana < ability.mana_cost:
                return False
            if proposal.kind == ActionKind.CAST_SUMMON and state.summons.at_cap():
                return False
        return True

    def select(self, state: CombatState) -> ActionProposal | None:
        """Return the winning proposal, or None if the player idles this tick."""
        if not state.player.alive or state.timers.global_cooldown > 0:
            return None
        for rule in self._rules:
            if not rule.enabled:
                continue
            if self.is_satisfied(rule, state):
                return ActionProposal.from_action(
                    rule.action, rule.rule_id,
                    reason=f"p{rule.priority} {rule.condition_type.name.lower()} {rule.condition_value:g}",
                )
        return None
