"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class ConditionType(IntEnum):
    """Rule trigger predicates.  UNKNOWN never matches."""

    UNKNOWN = 0
    HP_BELOW = 1
    HP_ABOVE = 2
    ALWAYS = 3


@unique
class ActionKind(IntEnum):
    """What a resolved rule action asks the executor to do."""

    UNKNOWN = 0
    NONE = 1
    MELEE = 2
    CAST_INSTANT = 3
    TOGGLE_AURA = 4
    CAST_SUMMON = 5


@unique
class AbilityKind(IntEnum):
    """Ability families."""

    INSTANT = 0
    SUMMON = 1


@unique
class DamageType(IntEnum):
    """Damage categories for floating numbers and proc qualification."""

    PHYSICAL = 0
    HOLY = 1
    ENEMY = 2
    SUMMON = 3
    HEALING = 4


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    VARIANCE = 0
    PROC = 1
    TARGETING = 2
    GOLD = 3
    LOOT = 4


@unique
class ItemType(IntEnum):
    """Equipment slots an item can occupy."""

    WEAPON = 0
    ARMOR = 1
    ACCESSORY = 2


@unique
class Rarity(IntEnum):
    """Item rarity tiers."""

    COMMON = 0
    UNCOMMON = 1
    RARE = 2


@unique
class TargetSide(IntEnum):
    """Which side of the arena a floating number appears on."""

    PLAYER = 0
    ENEMY = 1
    SUMMON = 2


class LogCategory(str, Enum):
    """Combat log tags consumed by the presentation sink."""

    DAMAGE = "damage"
    HEAL = "heal"
    MANA = "mana"
    SYSTEM = "system"
    MELEE = "melee"
    PLAYER_MAGIC = "player-magic"
    SUMMON = "summon"
