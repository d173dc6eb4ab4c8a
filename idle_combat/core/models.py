"""Core data models: Character, Summon."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from idle_combat.core.abilities import AURA_REGISTRY
from idle_combat.core.items import Inventory


@dataclass(slots=True)
class Character:
    """A combatant — the player or the current enemy.

    ``base_*`` fields never depend on equipment or auras.  ``damage``,
    ``armor``, ``mana_regen`` and ``max_mana`` are effective values,
    rebuilt by ``recalculate()`` from scratch.
    """

    name: str
    hp: int
    max_hp: int
    mana: int = 0
    max_mana: int = 0
    base_mana: int = 0
    mana_regen: float = 0.0
    base_mana_regen: float = 0.0
    damage: int = 0
    base_damage: int = 0
    armor: int = 0
    base_armor: int = 0
    gold: int = 0
    kind: str = "player"
    generation: int = 0          # bumped on enemy replacement / player respawn
    inventory: Inventory | None = None

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def hp_percent(self) -> float:
        return self.hp / self.max_hp * 100 if self.max_hp > 0 else 0.0

    @property
    def display_hp(self) -> int:
        """HP clamped to [0, max_hp] for presentation."""
        return max(0, min(self.hp, self.max_hp))

    def mana_pool(self) -> int:
        """Unreserved mana ceiling: base mana plus equipment."""
        pool = self.base_mana
        if self.inventory:
            pool += int(self.inventory.equipment_bonus("max_mana_bonus"))
        return max(pool, 0)

    def recalculate(self, active_auras: Iterable[str] = ()) -> None:
        """Derive effective stats from (base stats, equipped items, active auras)."""
        damage = self.base_damage
        armor = self.base_armor
        regen = self.base_mana_regen
        if self.inventory:
            damage += int(self.inventory.equipment_bonus("damage_bonus"))
            armor += int(self.inventory.equipment_bonus("armor_bonus"))
            regen += float(self.inventory.equipment_bonus("mana_regen_bonus"))

        reserve = 0.0
        for aura_id in active_auras:
            aura = AURA_REGISTRY.get(aura_id)
            if aura is not None:
                reserve += aura.mana_reserve
        reserve = min(max(reserve, 0.0), 1.0)

        self.damage = max(damage, 0)
        self.armor = max(armor, 0)
        self.mana_regen = max(regen, 0.0)
        self.max_mana = math.floor(self.mana_pool() * (1 - reserve))
        if self.mana > self.max_mana:
            self.mana = self.max_mana

    def heal(self, amount: int) -> int:
        """Restore up to *amount* HP.  Returns the HP actually gained."""
        if amount <= 0:
            return 0
        old = self.hp
        self.hp = min(self.hp + amount, self.max_hp)
        return max(self.hp - old, 0)

    def restore_mana(self, amount: int) -> int:
        if amount <= 0:
            return 0
        old = self.mana
        self.mana = min(self.mana + amount, self.max_mana)
        return max(self.mana - old, 0)


@dataclass(slots=True)
class Summon:
    """A temporary autonomous ally.  Owned by the SummonManager."""

    summon_id: int
    name: str
    hp: int
    max_hp: int
    damage: int
    attack_speed: int            # ms between attacks
    time_remaining: float        # ms of lifespan left
    attack_timer: float = 0.0    # count-up toward attack_speed
    sprite: str = "G"

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def expired(self) -> bool:
        return self.time_remaining <= 0


@dataclass(slots=True)
class CombatTimers:
    """Millisecond countdowns driving the player's activity state."""

    global_cooldown: float = 0.0
    ability_cooldowns: dict[str, float] = field(default_factory=dict)
    is_swinging: bool = False
    swing_remaining: float = 0.0
    enemy_attack_timer: float = 0.0

    def ability_ready(self, ability_id: str) -> bool:
        return self.ability_cooldowns.get(ability_id, 0) <= 0

    def clear_swing(self) -> None:
        self.is_swinging = False
        self.swing_remaining = 0.0
