"""Core data models, content registries and the combat state."""

from idle_combat.core.enums import ActionKind, ConditionType, DamageType, Domain, LogCategory
from idle_combat.core.models import Character, CombatTimers, Summon
from idle_combat.core.rules import CombatRule
from idle_combat.core.combat_state import CombatState
from idle_combat.core.snapshot import CombatSnapshot

__all__ = [
    "ActionKind",
    "Character",
    "CombatRule",
    "CombatSnapshot",
    "CombatState",
    "CombatTimers",
    "ConditionType",
    "DamageType",
    "Domain",
    "LogCategory",
    "Summon",
]
