"""Damage policy: one variance roll for every landing hit, then mitigation.

Mitigation is a strategy keyed by who is being hit:
  - the player subtracts flat armor, never dropping below 1;
  - summons and the enemy take the varianced amount unmitigated.
To add a new mitigation rule:
  1. Create a new Mitigation subclass.
  2. Register it in MITIGATIONS.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from idle_combat.core.enums import Domain, TargetSide

if TYPE_CHECKING:
    from idle_combat.config import CombatConfig
    from idle_combat.systems.rng import RollStream


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up."""
    return int(math.floor(value + 0.5))


def roll_damage(base: float, rolls: RollStream, config: CombatConfig) -> int:
    """Apply the uniform variance band to *base* and round.  Never negative."""
    mult = rolls.uniform(Domain.VARIANCE, config.damage_variance_min, config.damage_variance_max)
    return max(round_half_up(base * mult), 0)


# ---------------------------------------------------------------------------
# Mitigation strategies
# ---------------------------------------------------------------------------

class Mitigation(ABC):
    """Reduces a varianced hit according to the defender's defences."""

    @abstractmethod
    def apply(self, raw: int, armor: int) -> int:
        """Return the damage actually dealt."""


class FlatArmorMitigation(Mitigation):
    """Subtract armor; an attack that lands always deals at least 1."""

    def apply(self, raw: int, armor: int) -> int:
        return max(raw - max(armor, 0), 1)


class NoMitigation(Mitigation):

    def apply(self, raw: int, armor: int) -> int:
        return max(raw, 0)


MITIGATIONS: dict[int, Mitigation] = {
    TargetSide.PLAYER: FlatArmorMitigation(),
    TargetSide.ENEMY: NoMitigation(),
    TargetSide.SUMMON: NoMitigation(),
}

DEFAULT_MITIGATION: Mitigation = MITIGATIONS[TargetSide.ENEMY]


def get_mitigation(target: int) -> Mitigation:
    return MITIGATIONS.get(target, DEFAULT_MITIGATION)
