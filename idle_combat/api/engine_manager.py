"""EngineManager — runs the CombatEngine on a background thread.

The API reads an atomically swapped immutable CombatSnapshot.  Ticks and
manual commands (casts, toggles, equipment, rule changes) all take the
engine lock, so the engine is only ever mutated by one thread at a time.

Time is virtual: every loop iteration credits ``tick_interval_ms`` of
combat time and then sleeps ``tick_rate`` seconds.  Changing the tick
rate is how the game speeds up or slows down; the engine itself only
ever sees fixed deltas.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from idle_combat.core.rules import CombatRule, default_rules
from idle_combat.engine.combat_loop import CombatEngine
from idle_combat.utils.event_log import EventLog
from idle_combat.utils.rules_store import JsonRuleStore

if TYPE_CHECKING:
    from idle_combat.config import CombatConfig
    from idle_combat.core.snapshot import CombatSnapshot
    from idle_combat.engine.resolver import CombatTally

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutcome:
    """Result of a player command, captured under the engine lock."""

    ok: bool
    message: str        # newest combat log line; the reason when rejected
    tick: int


class EngineManager:
    """Manages the combat lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded ring buffer)
      - control commands (start / pause / resume / step / reset)
      - player commands (cast / toggle / equip / unequip / rules)
    """

    def __init__(self, config: CombatConfig) -> None:
        self.config = config
        self._tick_rate: float = config.tick_interval_ms / 1000   # real time == combat time

        self._store: JsonRuleStore | None = JsonRuleStore(config.rules_file) if config.rules_file else None
        self._engine: CombatEngine | None = None
        self._virtual_ms: float = 0.0

        # Thread-safe shared state
        self._engine_lock = threading.RLock()
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: CombatSnapshot | None = None
        self._event_log = EventLog()

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        """Seconds of real time between ticks."""
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.001, min(value, 2.0))

    @property
    def time_scale(self) -> float:
        """Combat milliseconds credited per real millisecond."""
        return (self.config.tick_interval_ms / 1000) / self._tick_rate

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def tally(self) -> CombatTally:
        assert self._engine is not None
        return self._engine.tally

    # -- snapshot access --

    def get_snapshot(self) -> CombatSnapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="combat-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at tick %d", self._current_tick())

    def resume(self) -> None:
        with self._engine_lock:
            if self._engine is not None:
                self._engine.resync(self._virtual_ms)
        self._paused.clear()
        logger.info("EngineManager resumed at tick %d", self._current_tick())

    def step(self) -> None:
        """Execute exactly one tick (must be paused)."""
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild with the current rules, and leave ready to start."""
        self.stop()
        self._event_log.clear()
        self._build()
        logger.info("EngineManager reset.")

    # -- player commands --

    def cast_ability(self, ability_id: str) -> CommandOutcome:
        return self._command(lambda e: e.cast_ability(ability_id))

    def toggle_aura(self, aura_id: str) -> CommandOutcome:
        return self._command(lambda e: e.toggle_aura(aura_id))

    def equip(self, item_id: str) -> CommandOutcome:
        return self._command(lambda e: e.equip(item_id))

    def unequip(self, slot: str) -> CommandOutcome:
        return self._command(lambda e: e.unequip(slot))

    def get_rules(self) -> list[CombatRule]:
        with self._engine_lock:
            assert self._engine is not None
            return self._engine.rules

    def replace_rules(self, rules: Iterable[CombatRule]) -> list[CombatRule]:
        """Swap the active rule set and persist it if a rules file is configured."""
        rules = list(rules)
        with self._engine_lock:
            assert self._engine is not None
            self._engine.load_rules(rules)
            active = self._engine.rules
        if self._store is not None:
            self._store.save(active)
        return active

    # -- internals --

    def _command(self, fn) -> CommandOutcome:
        with self._engine_lock:
            assert self._engine is not None
            ok = fn(self._engine)
            # Read while locked so a later tick cannot replace the newest line
            log = self._engine.combat_log
            outcome = CommandOutcome(
                ok=ok,
                message=log[0].message if log else "",
                tick=self._engine.clock.tick_number,
            )
            self._publish_snapshot()
        return outcome

    def _load_rules(self) -> list[CombatRule]:
        if self._store is None:
            return default_rules()
        return self._store.load()

    def _build(self) -> None:
        """Construct a fresh engine from config."""
        with self._engine_lock:
            rules = self._engine.rules if self._engine is not None else self._load_rules()
            self._virtual_ms = 0.0
            self._engine = CombatEngine(self.config, rules=rules, sink=self._event_log, now_ms=0.0)
            self._publish_snapshot()

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")
        assert self._engine is not None

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            with self._engine_lock:
                self._virtual_ms += self.config.tick_interval_ms
                self._engine.tick(self._virtual_ms)
                self._publish_snapshot()

            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _publish_snapshot(self) -> None:
        assert self._engine is not None
        snap = self._engine.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _current_tick(self) -> int:
        snap = self.get_snapshot()
        return snap.tick if snap else 0
