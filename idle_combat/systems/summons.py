"""SummonManager — owns every live summon.

Per tick: decay lifespans, remove the ones that faded, then let each
survivor advance its own attack timer and hit the enemy.  Summons killed
by the enemy are removed by ``cull()`` with a distinct message.  The
manager enforces the cap; it never decides to spawn on its own.
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING

from idle_combat.actions.damage import get_mitigation, roll_damage
from idle_combat.core.enums import DamageType, LogCategory, TargetSide
from idle_combat.core.models import Summon

if TYPE_CHECKING:
    from idle_combat.config import CombatConfig
    from idle_combat.core.abilities import AbilityDef
    from idle_combat.core.models import Character
    from idle_combat.systems.rng import RollStream
    from idle_combat.utils.event_log import TickRecorder

logger = logging.getLogger(__name__)


class SummonManager:
    __slots__ = ("_config", "_rolls", "_recorder", "_summons", "_ids")

    def __init__(self, config: CombatConfig, rolls: RollStream, recorder: TickRecorder) -> None:
        self._config = config
        self._rolls = rolls
        self._recorder = recorder
        self._summons: list[Summon] = []
        self._ids = itertools.count(1)

    @property
    def max_summons(self) -> int:
        return self._config.max_summons

    @property
    def count(self) -> int:
        return len(self._summons)

    def at_cap(self) -> bool:
        return len(self._summons) >= self._config.max_summons

    def alive(self) -> list[Summon]:
        return [s for s in self._summons if s.alive]

    def __iter__(self):
        return iter(self._summons)

    def __len__(self) -> int:
        return len(self._summons)

    def spawn(self, ability: AbilityDef, damage: int) -> Summon:
        """Create a summon from *ability*.  Callers check ``at_cap()`` first."""
        if self.at_cap():
            raise ValueError(f"summon cap reached ({self._config.max_summons})")
        summon = Summon(
            summon_id=next(self._ids),
            name=ability.summon_name or ability.name,
            hp=ability.summon_hp,
            max_hp=ability.summon_hp,
            damage=damage,
            attack_speed=ability.summon_attack_speed,
            time_remaining=float(ability.summon_lifespan),
            sprite=ability.summon_sprite or "G",
        )
        self._summons.append(summon)
        logger.debug("Spawned summon %d (%s, dmg=%d)", summon.summon_id, summon.name, damage)
        return summon

    def update(self, enemy: Character, delta_ms: float) -> None:
        """Decay lifespans, drop expired summons, then attack with the rest."""
        if not self._summons:
            return

        for s in self._summons:
            s.time_remaining -= delta_ms
        faded = [s for s in self._summons if s.expired]
        if faded:
            self._summons = [s for s in self._summons if not s.expired]
            for s in faded:
                self._recorder.log(LogCategory.SUMMON, f"{s.name} fades away...", {"summon_id": s.summon_id})

        for s in self._summons:
            if not s.alive:
                continue
            s.attack_timer += delta_ms
            if s.attack_timer < s.attack_speed:
                continue
            s.attack_timer = 0.0
            if not enemy.alive:
                continue
            dmg = get_mitigation(TargetSide.ENEMY).apply(
                roll_damage(s.damage, self._rolls, self._config), enemy.armor)
            enemy.hp -= dmg
            self._recorder.number(dmg, DamageType.SUMMON, TargetSide.ENEMY)
            self._recorder.log(
                LogCategory.SUMMON,
                f"{s.name} attacks {enemy.name} for {dmg} damage!",
                {"summon_id": s.summon_id, "damage": dmg},
            )

    def cull(self) -> list[Summon]:
        """Remove summons whose HP reached zero.  Returns the removed ones."""
        destroyed = [s for s in self._summons if not s.alive]
        if destroyed:
            self._summons = [s for s in self._summons if s.alive]
            for s in destroyed:
                self._recorder.log(LogCategory.SUMMON, f"{s.name} has been destroyed!", {"summon_id": s.summon_id})
        return destroyed
