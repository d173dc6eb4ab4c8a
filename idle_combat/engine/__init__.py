"""Engine layer: the tick pipeline and combat-end resolution."""

from idle_combat.engine.combat_loop import CombatEngine, TickResult
from idle_combat.engine.resolver import CombatEndResolver

__all__ = ["CombatEndResolver", "CombatEngine", "TickResult"]
