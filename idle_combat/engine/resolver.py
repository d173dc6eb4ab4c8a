"""CombatEndResolver — enemy defeat, player death and destroyed summons.

Runs once per tick after every source of damage has been applied.  Both
the enemy and the player checks run every tick, so a double defeat in
the same tick resolves both sides.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from idle_combat.core.enums import Domain, LogCategory
from idle_combat.core.items import LOOT_TABLES, get_item, pick_weighted

if TYPE_CHECKING:
    from idle_combat.config import CombatConfig
    from idle_combat.core.combat_state import CombatState
    from idle_combat.systems.rng import RollStream
    from idle_combat.utils.event_log import TickRecorder

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CombatTally:
    """Running totals for a session."""

    kills: int = 0
    deaths: int = 0
    gold_earned: int = 0
    gold_lost: int = 0
    items_found: int = 0


class CombatEndResolver:
    __slots__ = ("_config", "_rolls", "_recorder", "tally")

    def __init__(self, config: CombatConfig, rolls: RollStream, recorder: TickRecorder) -> None:
        self._config = config
        self._rolls = rolls
        self._recorder = recorder
        self.tally = CombatTally()

    def resolve(self, state: CombatState) -> tuple[bool, bool]:
        """Return (enemy_defeated, player_defeated) for this tick."""
        state.summons.cull()
        enemy_down = not state.enemy.alive
        player_down = not state.player.alive
        if enemy_down:
            self._enemy_defeated(state)
        if player_down:
            self._player_defeated(state)
        return enemy_down, player_down

    # ------------------------------------------------------------------

    def _enemy_defeated(self, state: CombatState) -> None:
        cfg = self._config
        enemy = state.enemy
        player = state.player

        gold = self._rolls.randint(Domain.GOLD, cfg.gold_reward_min, cfg.gold_reward_max)
        player.gold += gold
        self.tally.kills += 1
        self.tally.gold_earned += gold
        self._recorder.log(
            LogCategory.SYSTEM,
            f"{enemy.name} has been defeated! +{gold} gold",
            {"gold": gold, "generation": enemy.generation},
        )

        if self._rolls.chance(Domain.GOLD, cfg.bonus_gold_chance):
            bonus = self._rolls.randint(Domain.GOLD, cfg.bonus_gold_min, cfg.bonus_gold_max)
            player.gold += bonus
            self.tally.gold_earned += bonus
            self._recorder.log(LogCategory.SYSTEM, f"Lucky find! +{bonus} bonus gold", {"gold": bonus})

        self._roll_drop(state)

        old_gen = enemy.generation
        fresh = state.replace_enemy()
        logger.info("Enemy gen %d defeated; spawned %s gen %d", old_gen, fresh.name, fresh.generation)
        self._recorder.log(LogCategory.SYSTEM, f"A new {fresh.name} appears!")

    def _roll_drop(self, state: CombatState) -> None:
        template = state.enemy_template
        inventory = state.player.inventory
        if inventory is None:
            return
        if not self._rolls.chance(Domain.LOOT, template.drop_chance):
            return
        table = LOOT_TABLES.get(template.enemy_id, [])
        item_id = pick_weighted(table, self._rolls.random(Domain.LOOT))
        item = get_item(item_id) if item_id else None
        if item is None:
            return
        inventory.add_item(item.item_id)
        self.tally.items_found += 1
        self._recorder.log(
            LogCategory.SYSTEM,
            f"{template.name} dropped {item.name}!",
            {"item_id": item.item_id, "rarity": item.rarity.name.lower()},
        )

    def _player_defeated(self, state: CombatState) -> None:
        player = state.player
        timers = state.timers

        lost = math.floor(player.gold * self._config.death_gold_penalty)
        player.gold -= lost
        self.tally.deaths += 1
        self.tally.gold_lost += lost
        self._recorder.log(
            LogCategory.SYSTEM,
            f"{player.name} has been defeated! Lost {lost} gold.",
            {"gold_lost": lost},
        )

        player.hp = player.max_hp
        player.mana = player.max_mana
        timers.clear_swing()
        timers.global_cooldown = 0.0
        timers.ability_cooldowns.clear()
        # Pending bonus strikes from the previous life become stale
        player.generation += 1
        logger.info("Player died (life %d); lost %d gold", player.generation, lost)
        self._recorder.log(LogCategory.SYSTEM, f"{player.name} respawns with full health and mana.")
