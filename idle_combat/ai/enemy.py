"""EnemyAI — a fixed-interval attacker.

The enemy counts up toward its attack speed, strikes once, and resets
to zero.  While summons are alive some attacks are redirected at a
random summon; those hits ignore armor.  Hits on the player go through
flat armor and always deal at least 1.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from idle_combat.actions.damage import get_mitigation, roll_damage
from idle_combat.core.enums import DamageType, Domain, LogCategory, TargetSide

if TYPE_CHECKING:
    from idle_combat.config import CombatConfig
    from idle_combat.core.combat_state import CombatState
    from idle_combat.systems.rng import RollStream
    from idle_combat.utils.event_log import TickRecorder

logger = logging.getLogger(__name__)


class EnemyAI:
    __slots__ = ("_config", "_rolls", "_recorder")

    def __init__(self, config: CombatConfig, rolls: RollStream, recorder: TickRecorder) -> None:
        self._config = config
        self._rolls = rolls
        self._recorder = recorder

    def update(self, state: CombatState, delta_ms: float) -> bool:
        """Advance the attack timer.  Returns True if an attack resolved."""
        enemy = state.enemy
        player = state.player
        if not enemy.alive or not player.alive:
            return False

        timers = state.timers
        timers.enemy_attack_timer += delta_ms
        if timers.enemy_attack_timer < state.enemy_template.attack_speed:
            return False
        timers.enemy_attack_timer = 0.0

        raw = roll_damage(enemy.damage, self._rolls, self._config)
        living = state.summons.alive()
        if living and self._rolls.chance(Domain.TARGETING, self._config.summon_target_chance):
            target = living[self._rolls.choice_index(Domain.TARGETING, len(living))]
            dmg = get_mitigation(TargetSide.SUMMON).apply(raw, 0)
            target.hp -= dmg
            self._recorder.number(dmg, DamageType.ENEMY, TargetSide.SUMMON, target.summon_id)
            self._recorder.log(
                LogCategory.DAMAGE,
                f"{enemy.name} attacks {target.name} for {dmg} damage!",
                {"damage": dmg, "summon_id": target.summon_id},
            )
            return True

        dmg = get_mitigation(TargetSide.PLAYER).apply(raw, player.armor)
        player.hp -= dmg
        self._recorder.number(dmg, DamageType.ENEMY, TargetSide.PLAYER)
        self._recorder.log(
            LogCategory.DAMAGE,
            f"{enemy.name} attacks {player.name} for {dmg} damage!",
            {"damage": dmg, "raw": raw, "armor": player.armor},
        )
        return True
