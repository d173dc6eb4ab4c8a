"""Mutable authoritative combat state — only mutated on the engine thread."""

from __future__ import annotations

from typing import TYPE_CHECKING

from idle_combat.core.enemies import EnemyTemplate, create_enemy
from idle_combat.core.models import Character, CombatTimers

if TYPE_CHECKING:
    from idle_combat.systems.summons import SummonManager


class CombatState:
    """The single source of truth for one combat session."""

    __slots__ = ("player", "enemy", "enemy_template", "timers", "active_auras", "summons", "_next_enemy_generation")

    def __init__(
        self,
        player: Character,
        enemy_template: EnemyTemplate,
        summons: SummonManager,
    ) -> None:
        self.player: Character = player
        self.enemy_template: EnemyTemplate = enemy_template
        self.enemy: Character = create_enemy(enemy_template, generation=1)
        self._next_enemy_generation: int = 2
        self.timers: CombatTimers = CombatTimers()
        self.active_auras: set[str] = set()
        self.summons: SummonManager = summons

    def replace_enemy(self) -> Character:
        """Swap in a fresh full-HP enemy of the same type with a new generation."""
        self.enemy = create_enemy(self.enemy_template, generation=self._next_enemy_generation)
        self._next_enemy_generation += 1
        self.timers.enemy_attack_timer = 0.0
        return self.enemy

    def recalculate_player(self) -> None:
        self.player.recalculate(self.active_auras)
