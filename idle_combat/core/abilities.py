"""Ability and aura definitions.

Abilities are immutable templates looked up by id; the executor binds
caster and target at resolution time.  Auras are toggles owned by the
player: they may reserve a fraction of the mana pool and grant a
bonus-strike proc on qualifying attacks.
"""

from __future__ import annotations

from dataclasses import dataclass

from idle_combat.core.enums import AbilityKind, ActionKind, DamageType


# ---------------------------------------------------------------------------
# Ability definition
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AbilityDef:
    """Immutable ability template."""
    ability_id: str
    name: str
    kind: AbilityKind
    mana_cost: int
    cast_time: int = 0               # ms; 0 = instant
    cooldown: int = 0                # ms; 0 = no cooldown beyond the GCD
    damage: int = 0                  # flat damage (used when no multiplier)
    damage_multiplier: float = 0.0   # × a freshly rolled melee-equivalent hit
    damage_type: DamageType = DamageType.PHYSICAL
    heal_on_damage: bool = False
    # Summon fields
    summon_name: str = ""
    summon_hp: int = 0
    summon_damage_fraction: float = 0.0
    summon_attack_speed: int = 0     # ms between summon attacks
    summon_lifespan: int = 0         # ms
    summon_sprite: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class AuraDef:
    """Immutable aura template."""
    aura_id: str
    name: str
    mana_reserve: float = 0.0        # fraction of the mana pool removed while active
    proc_chance: float = 0.0         # per qualifying attack
    proc_attacks: int = 0            # bonus strikes per proc
    proc_stagger_ms: int = 100       # delay between successive bonus strikes
    description: str = ""


ABILITY_REGISTRY: dict[str, AbilityDef] = {}
AURA_REGISTRY: dict[str, AuraDef] = {}


def _reg(a: AbilityDef) -> AbilityDef:
    ABILITY_REGISTRY[a.ability_id] = a
    return a


def _reg_aura(a: AuraDef) -> AuraDef:
    AURA_REGISTRY[a.aura_id] = a
    return a


_reg(AbilityDef(
    ability_id="holy_strike",
    name="Holy Strike",
    kind=AbilityKind.INSTANT,
    mana_cost=25,
    cooldown=6000,
    damage_multiplier=2.5,
    damage_type=DamageType.HOLY,
    heal_on_damage=True,
    description="Instantly strike with holy power, healing for the damage dealt.",
))

_reg(AbilityDef(
    ability_id="summon_guardian",
    name="Summon Spirit Guardian",
    kind=AbilityKind.SUMMON,
    mana_cost=40,
    cooldown=10000,
    summon_name="Spirit Guardian",
    summon_hp=30,
    summon_damage_fraction=0.5,
    summon_attack_speed=2000,
    summon_lifespan=20000,
    summon_sprite="G",
    description="Call a spirit that fights at your side for 20 seconds.",
))

_reg_aura(AuraDef(
    aura_id="windfury_aura",
    name="Windfury Aura",
    mana_reserve=0.5,
    proc_chance=0.2,
    proc_attacks=2,
    proc_stagger_ms=100,
    description="Reserves 50% of max mana. 20% chance on melee or Holy Strike for 2 extra attacks.",
))


# ---------------------------------------------------------------------------
# Action table: rule action strings → (ActionKind, referenced id)
# ---------------------------------------------------------------------------

ACTION_TABLE: dict[str, tuple[ActionKind, str | None]] = {
    "melee": (ActionKind.MELEE, None),
    "none": (ActionKind.NONE, None),
    "holy_strike": (ActionKind.CAST_INSTANT, "holy_strike"),
    "summon_guardian": (ActionKind.CAST_SUMMON, "summon_guardian"),
    "toggle_windfury": (ActionKind.TOGGLE_AURA, "windfury_aura"),
}


def resolve_action(action: str) -> tuple[ActionKind, str | None]:
    """Map a rule's action string to a closed ActionKind.  Unknown → UNKNOWN."""
    return ACTION_TABLE.get(action, (ActionKind.UNKNOWN, None))


def proc_aura(active_auras: set[str] | frozenset[str]) -> AuraDef | None:
    """Return the first active aura that grants bonus strikes, if any."""
    for aura_id in sorted(active_auras):
        aura = AURA_REGISTRY.get(aura_id)
        if aura is not None and aura.proc_attacks > 0 and aura.proc_chance > 0:
            return aura
    return None
