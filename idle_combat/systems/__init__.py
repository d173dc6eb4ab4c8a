"""Engine systems: RNG, clock, mana, timers, deferred strikes, summons."""

from idle_combat.systems.rng import DeterministicRNG, RollStream
from idle_combat.systems.clock import CombatClock
from idle_combat.systems.mana import ManaAccumulator
from idle_combat.systems.timers import TimerBank
from idle_combat.systems.deferred import DeferredScheduler
from idle_combat.systems.summons import SummonManager

__all__ = [
    "CombatClock",
    "DeferredScheduler",
    "DeterministicRNG",
    "ManaAccumulator",
    "RollStream",
    "SummonManager",
    "TimerBank",
]
