"""Enemy roster."""

from __future__ import annotations

from dataclasses import dataclass

from idle_combat.core.models import Character


@dataclass(frozen=True, slots=True)
class EnemyTemplate:
    """Immutable enemy type."""
    enemy_id: str
    name: str
    hp: int
    damage: int
    attack_speed: int      # ms between attacks
    sprite: str = "?"
    xp_reward: int = 0
    drop_chance: float = 0.0


ENEMY_REGISTRY: dict[str, EnemyTemplate] = {}


def _reg(t: EnemyTemplate) -> EnemyTemplate:
    ENEMY_REGISTRY[t.enemy_id] = t
    return t


_reg(EnemyTemplate("skeleton", "Skeleton", hp=100, damage=10, attack_speed=3000, sprite="S", xp_reward=10, drop_chance=0.1))
_reg(EnemyTemplate("zombie",   "Zombie",   hp=150, damage=15, attack_speed=4000, sprite="Z", xp_reward=20, drop_chance=0.15))


def get_enemy_template(enemy_id: str) -> EnemyTemplate:
    tmpl = ENEMY_REGISTRY.get(enemy_id)
    if tmpl is None:
        raise KeyError(f"Unknown enemy type: {enemy_id!r}")
    return tmpl


def create_enemy(template: EnemyTemplate, generation: int) -> Character:
    """Build a fresh full-health enemy.  Each defeat produces a new object."""
    return Character(
        name=template.name,
        hp=template.hp,
        max_hp=template.hp,
        mana=0,
        max_mana=0,
        base_mana=0,
        mana_regen=0.0,
        base_mana_regen=0.0,
        damage=template.damage,
        base_damage=template.damage,
        armor=0,
        base_armor=0,
        gold=0,
        kind=template.enemy_id,
        generation=generation,
    )
