"""CombatEngine — the authoritative per-tick pipeline.

Phase order each tick:
  1. Clock            — wall-clock timestamp → non-negative delta
  2. Mana             — regeneration with fractional carry
  3. Timer Bank       — GCD, ability cooldowns, swing completion, due bonus strikes
  4. Rule Engine      — choose at most one player action
  5. Action Executor  — perform it
  6. Summon Manager   — lifespans, expiry, summon attacks
  7. Enemy AI         — fixed-interval attack on the player or a summon
  8. Resolver         — enemy defeat / player death / destroyed summons
  9. Snapshot + the tick's events

All mutation happens on the caller's thread; the engine never sleeps and
never reads the wall clock itself.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from idle_combat.actions.executor import ActionExecutor
from idle_combat.ai.enemy import EnemyAI
from idle_combat.ai.rule_engine import RuleEngine
from idle_combat.config import CombatConfig
from idle_combat.core.combat_state import CombatState
from idle_combat.core.enemies import get_enemy_template
from idle_combat.core.enums import LogCategory
from idle_combat.core.items import Inventory
from idle_combat.core.models import Character
from idle_combat.core.rules import CombatRule, default_rules
from idle_combat.core.snapshot import CombatSnapshot
from idle_combat.engine.resolver import CombatEndResolver, CombatTally
from idle_combat.systems.clock import CombatClock
from idle_combat.systems.deferred import DeferredScheduler
from idle_combat.systems.mana import ManaAccumulator
from idle_combat.systems.rng import DeterministicRNG, RollStream
from idle_combat.systems.summons import SummonManager
from idle_combat.systems.timers import TimerBank
from idle_combat.utils.event_log import CombatEvent, FloatingNumber, PresentationSink, TickRecorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TickResult:
    """What one call to ``tick()`` produced."""

    tick: int
    elapsed_ms: float
    snapshot: CombatSnapshot
    events: tuple[CombatEvent, ...]
    numbers: tuple[FloatingNumber, ...]


def create_player(config: CombatConfig) -> Character:
    """Build the Cleric at full health and mana."""
    player = Character(
        name=config.player_name,
        hp=config.player_base_hp,
        max_hp=config.player_base_hp,
        mana=config.player_base_mana,
        max_mana=config.player_base_mana,
        base_mana=config.player_base_mana,
        mana_regen=config.player_base_mana_regen,
        base_mana_regen=config.player_base_mana_regen,
        damage=config.player_base_damage,
        base_damage=config.player_base_damage,
        armor=config.player_base_armor,
        base_armor=config.player_base_armor,
        gold=config.player_starting_gold,
        kind="player",
        generation=1,
        inventory=Inventory(),
    )
    player.recalculate()
    player.mana = player.max_mana
    return player


class CombatEngine:
    """One combat session: the player against a stream of respawning enemies."""

    __slots__ = (
        "_config",
        "_rng",
        "_rolls",
        "_recorder",
        "_clock",
        "_state",
        "_scheduler",
        "_executor",
        "_rules",
        "_mana",
        "_timers",
        "_enemy_ai",
        "_resolver",
        "_combat_log",
        "_pending_events",
        "_pending_numbers",
    )

    def __init__(
        self,
        config: CombatConfig | None = None,
        rules: Iterable[CombatRule] | None = None,
        sink: PresentationSink | None = None,
        now_ms: float = 0.0,
    ) -> None:
        self._config = config or CombatConfig()
        cfg = self._config
        self._rng = DeterministicRNG(cfg.seed)
        self._rolls = RollStream(self._rng)
        self._recorder = TickRecorder(sink)
        self._clock = CombatClock(now_ms)

        summons = SummonManager(cfg, self._rolls, self._recorder)
        self._state = CombatState(create_player(cfg), get_enemy_template(cfg.enemy_type), summons)

        self._scheduler = DeferredScheduler()
        self._executor = ActionExecutor(cfg, self._rolls, self._recorder, self._scheduler, self._clock)
        self._rules = RuleEngine(default_rules() if rules is None else rules)
        self._mana = ManaAccumulator()
        self._timers = TimerBank(on_swing_complete=lambda: self._executor.complete_melee(self._state))
        self._enemy_ai = EnemyAI(cfg, self._rolls, self._recorder)
        self._resolver = CombatEndResolver(cfg, self._rolls, self._recorder)

        self._combat_log: deque[CombatEvent] = deque(maxlen=max(cfg.max_log_entries, 1))
        self._pending_events: list[CombatEvent] = []
        self._pending_numbers: list[FloatingNumber] = []

        logger.info(
            "Combat engine created (seed=%d, enemy=%s, rules=%d)",
            cfg.seed, cfg.enemy_type, len(self._rules.rules),
        )
        self._begin_manual()
        self._recorder.log(LogCategory.SYSTEM, f"A wild {self._state.enemy.name} appears!")
        self._collect()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> CombatConfig:
        return self._config

    @property
    def state(self) -> CombatState:
        return self._state

    @property
    def clock(self) -> CombatClock:
        return self._clock

    @property
    def rules(self) -> list[CombatRule]:
        return self._rules.rules

    @property
    def tally(self) -> CombatTally:
        return self._resolver.tally

    @property
    def scheduler(self) -> DeferredScheduler:
        return self._scheduler

    @property
    def combat_log(self) -> tuple[CombatEvent, ...]:
        """Most recent combat log lines, newest first."""
        return tuple(self._combat_log)

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def tick(self, now_ms: float | None = None) -> TickResult:
        """Advance to *now_ms*, or by one configured interval if omitted."""
        if now_ms is None:
            return self.advance(float(self._config.tick_interval_ms))
        return self.advance(self._clock.delta(now_ms))

    def advance(self, delta_ms: float) -> TickResult:
        """Run the pipeline once for *delta_ms* of combat time.

        A zero delta runs no step, so repeated calls with the same
        timestamp leave the state untouched.
        """
        if delta_ms <= 0:
            return self._result()

        state = self._state
        tick = self._clock.advance(delta_ms)
        now = self._clock.elapsed_ms
        self._recorder.begin(tick, now)

        self._mana.update(state.player, delta_ms)
        self._timers.update(state.timers, delta_ms)
        self._scheduler.run_due(now, state.enemy.generation, state.player.generation)

        proposal = self._rules.select(state)
        if proposal is not None:
            logger.debug("Tick %d: %r", tick, proposal)
            self._executor.execute(proposal, state)

        state.summons.update(state.enemy, delta_ms)
        self._enemy_ai.update(state, delta_ms)
        self._resolver.resolve(state)

        self._collect()
        return self._result()

    def run(self, ticks: int) -> CombatTally:
        """Headless run of *ticks* fixed-interval steps."""
        for _ in range(ticks):
            result = self.tick()
            if result.tick % 200 == 0:
                logger.info(
                    "Tick %d: %s %d/%d HP vs %s %d/%d HP",
                    result.tick,
                    result.snapshot.player.name, result.snapshot.player.hp, result.snapshot.player.max_hp,
                    result.snapshot.enemy.name, result.snapshot.enemy.hp, result.snapshot.enemy.max_hp,
                )
        return self.tally

    def resync(self, now_ms: float) -> None:
        """Rebase the clock after a pause without crediting the gap."""
        self._clock.resync(now_ms)

    def create_snapshot(self) -> CombatSnapshot:
        return CombatSnapshot.from_state(
            self._state, self._clock.tick_number, self._clock.elapsed_ms, tuple(self._combat_log))

    # ------------------------------------------------------------------
    # Manual requests
    # ------------------------------------------------------------------

    def cast_ability(self, ability_id: str) -> bool:
        self._begin_manual()
        ok = self._executor.cast_ability(ability_id, self._state)
        self._collect()
        return ok

    def toggle_aura(self, aura_id: str) -> bool:
        self._begin_manual()
        ok = self._executor.toggle_aura(aura_id, self._state)
        self._collect()
        return ok

    def load_rules(self, rules: Iterable[CombatRule]) -> None:
        self._rules.load(rules)
        self._executor.reset_diagnostics()

    def equip(self, item_id: str) -> bool:
        inv = self._state.player.inventory
        self._begin_manual()
        ok = inv is not None and inv.equip(item_id)
        if ok:
            self.recalculate_stats()
            self._recorder.log(LogCategory.SYSTEM, f"{self._state.player.name} equips {item_id}.")
        else:
            self._recorder.log(LogCategory.SYSTEM, f"Cannot equip '{item_id}'")
        self._collect()
        return ok

    def unequip(self, slot: str) -> bool:
        inv = self._state.player.inventory
        self._begin_manual()
        ok = inv is not None and inv.unequip(slot)
        if ok:
            self.recalculate_stats()
            self._recorder.log(LogCategory.SYSTEM, f"{self._state.player.name} unequips their {slot}.")
        else:
            self._recorder.log(LogCategory.SYSTEM, f"Nothing to unequip in slot '{slot}'")
        self._collect()
        return ok

    def recalculate_stats(self) -> None:
        self._state.recalculate_player()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin_manual(self) -> None:
        self._recorder.begin(self._clock.tick_number, self._clock.elapsed_ms)

    def _collect(self) -> None:
        events, numbers = self._recorder.drain()
        # deque.extendleft reverses, leaving the newest event first
        self._combat_log.extendleft(events)
        self._pending_events.extend(events)
        self._pending_numbers.extend(numbers)

    def _result(self) -> TickResult:
        events, numbers = tuple(self._pending_events), tuple(self._pending_numbers)
        self._pending_events = []
        self._pending_numbers = []
        return TickResult(
            tick=self._clock.tick_number,
            elapsed_ms=self._clock.elapsed_ms,
            snapshot=self.create_snapshot(),
            events=events,
            numbers=numbers,
        )
