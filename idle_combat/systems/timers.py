"""Timer bank — global cooldown, ability cooldowns and the melee swing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from idle_combat.core.models import CombatTimers


class TimerBank:
    """Decrements the player's countdowns once per tick.

    Count-up attack timers (enemy, summons) belong to the systems that own
    those attackers and advance at their own pipeline position.
    """

    __slots__ = ("_on_swing_complete",)

    def __init__(self, on_swing_complete: Callable[[], None]) -> None:
        self._on_swing_complete = on_swing_complete

    def update(self, timers: CombatTimers, delta_ms: float) -> bool:
        """Advance all countdowns by *delta_ms*.  Returns True if a swing landed."""
        if timers.global_cooldown > 0:
            timers.global_cooldown -= delta_ms

        # Missing entry == ready
        for ability_id in list(timers.ability_cooldowns):
            remaining = timers.ability_cooldowns[ability_id] - delta_ms
            if remaining <= 0:
                del timers.ability_cooldowns[ability_id]
            else:
                timers.ability_cooldowns[ability_id] = remaining

        if timers.is_swinging:
            timers.swing_remaining -= delta_ms
            if timers.swing_remaining <= 0:
                timers.clear_swing()
                self._on_swing_complete()
                return True
        return False
