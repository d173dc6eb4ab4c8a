"""Immutable snapshot of the combat state for the presentation side."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from idle_combat.core.items import EQUIPMENT_SLOTS

if TYPE_CHECKING:
    from idle_combat.core.combat_state import CombatState
    from idle_combat.utils.event_log import CombatEvent


def player_status(state: CombatState) -> str:
    """One-line activity text: Dead, Swinging, GCD or Ready."""
    timers = state.timers
    if not state.player.alive:
        return "Dead"
    if timers.is_swinging:
        return f"Swinging: {max(timers.swing_remaining, 0) / 1000:.1f}s"
    if timers.global_cooldown > 0:
        return f"GCD: {timers.global_cooldown / 1000:.1f}s"
    return "Ready"


@dataclass(frozen=True, slots=True)
class PlayerView:
    name: str
    hp: int
    max_hp: int
    mana: int
    max_mana: int
    mana_reserved: int
    mana_regen: float
    damage: int
    armor: int
    gold: int
    status: str
    is_swinging: bool
    swing_remaining: float
    global_cooldown: float
    ability_cooldowns: Mapping[str, float]
    active_auras: tuple[str, ...]
    equipment: Mapping[str, str | None]
    bag: tuple[str, ...]
    generation: int


@dataclass(frozen=True, slots=True)
class EnemyView:
    kind: str
    name: str
    hp: int
    max_hp: int
    damage: int
    attack_speed: int
    next_attack_ms: float
    generation: int
    sprite: str


@dataclass(frozen=True, slots=True)
class SummonView:
    summon_id: int
    name: str
    hp: int
    max_hp: int
    damage: int
    attack_speed: int
    time_remaining: float
    sprite: str


@dataclass(frozen=True, slots=True)
class CombatSnapshot:
    """Read-only view of one combat session, safe to share across threads.

    HP values are clamped to ``[0, max_hp]`` here; the live state may hold
    a transiently negative HP until the resolver runs.
    """

    tick: int
    elapsed_ms: float
    player: PlayerView
    enemy: EnemyView
    summons: tuple[SummonView, ...]
    combat_log: tuple[CombatEvent, ...]     # newest first

    @classmethod
    def from_state(
        cls,
        state: CombatState,
        tick: int,
        elapsed_ms: float,
        combat_log: tuple[CombatEvent, ...] = (),
    ) -> CombatSnapshot:
        p = state.player
        e = state.enemy
        t = state.timers
        inv = p.inventory
        equipment = {slot: (getattr(inv, slot) if inv else None) for slot in EQUIPMENT_SLOTS}

        player = PlayerView(
            name=p.name,
            hp=p.display_hp,
            max_hp=p.max_hp,
            mana=p.mana,
            max_mana=p.max_mana,
            mana_reserved=max(p.mana_pool() - p.max_mana, 0),
            mana_regen=p.mana_regen,
            damage=p.damage,
            armor=p.armor,
            gold=p.gold,
            status=player_status(state),
            is_swinging=t.is_swinging,
            swing_remaining=max(t.swing_remaining, 0.0) if t.is_swinging else 0.0,
            global_cooldown=max(t.global_cooldown, 0.0),
            ability_cooldowns=MappingProxyType(dict(t.ability_cooldowns)),
            active_auras=tuple(sorted(state.active_auras)),
            equipment=MappingProxyType(equipment),
            bag=tuple(inv.items) if inv else (),
            generation=p.generation,
        )
        tmpl = state.enemy_template
        enemy = EnemyView(
            kind=tmpl.enemy_id,
            name=e.name,
            hp=e.display_hp,
            max_hp=e.max_hp,
            damage=e.damage,
            attack_speed=tmpl.attack_speed,
            next_attack_ms=max(tmpl.attack_speed - t.enemy_attack_timer, 0.0),
            generation=e.generation,
            sprite=tmpl.sprite,
        )
        summons = tuple(
            SummonView(
                summon_id=s.summon_id,
                name=s.name,
                hp=max(0, min(s.hp, s.max_hp)),
                max_hp=s.max_hp,
                damage=s.damage,
                attack_speed=s.attack_speed,
                time_remaining=max(s.time_remaining, 0.0),
                sprite=s.sprite,
            )
            for s in state.summons
        )
        return cls(
            tick=tick,
            elapsed_ms=elapsed_ms,
            player=player,
            enemy=enemy,
            summons=summons,
            combat_log=tuple(combat_log),
        )
