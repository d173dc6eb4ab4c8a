"""Combat events, the presentation sink protocol, and the API event feed."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Protocol

from idle_combat.core.enums import DamageType, LogCategory, TargetSide

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CombatEvent:
    """A single combat log line."""

    tick: int
    elapsed_ms: float
    category: LogCategory
    message: str
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class FloatingNumber:
    """A damage or heal amount to pop up over a combatant."""

    tick: int
    elapsed_ms: float
    amount: int
    damage_type: DamageType
    target: TargetSide
    target_id: int = 0           # summon id when target is SUMMON


class PresentationSink(Protocol):
    """Anything that wants to render what the core emits."""

    def on_log(self, event: CombatEvent) -> None: ...

    def on_number(self, number: FloatingNumber) -> None: ...


class TickRecorder:
    """Collects the events of the tick in progress and forwards them to a sink.

    Systems receive the recorder instead of a presentation layer, so the
    core only ever produces data.
    """

    __slots__ = ("tick", "elapsed_ms", "_events", "_numbers", "_sink")

    def __init__(self, sink: PresentationSink | None = None) -> None:
        self.tick: int = 0
        self.elapsed_ms: float = 0.0
        self._events: list[CombatEvent] = []
        self._numbers: list[FloatingNumber] = []
        self._sink = sink

    def begin(self, tick: int, elapsed_ms: float) -> None:
        self.tick = tick
        self.elapsed_ms = elapsed_ms
        self._events = []
        self._numbers = []

    def log(self, category: LogCategory, message: str, metadata: dict[str, Any] | None = None) -> None:
        event = CombatEvent(
            tick=self.tick,
            elapsed_ms=self.elapsed_ms,
            category=category,
            message=message,
            metadata=metadata,
        )
        self._events.append(event)
        logger.debug("[%s] %s", category.value, message)
        if self._sink is not None:
            self._sink.on_log(event)

    def number(self, amount: int, damage_type: DamageType, target: TargetSide, target_id: int = 0) -> None:
        num = FloatingNumber(
            tick=self.tick,
            elapsed_ms=self.elapsed_ms,
            amount=amount,
            damage_type=damage_type,
            target=target,
            target_id=target_id,
        )
        self._numbers.append(num)
        if self._sink is not None:
            self._sink.on_number(num)

    def drain(self) -> tuple[list[CombatEvent], list[FloatingNumber]]:
        """Hand over everything recorded since the last drain."""
        events, numbers = self._events, self._numbers
        self._events = []
        self._numbers = []
        return events, numbers


class EventLog:
    """Bounded event log shared with the API. Writers append; readers snapshot a slice.

    Thread-safe via a simple lock — writes happen once per tick batch
    and reads are non-blocking copies.  Also usable as a PresentationSink.
    """

    __slots__ = ("_buffer", "_numbers", "_lock")

    def __init__(self, maxlen: int = 2000) -> None:
        self._buffer: deque[CombatEvent] = deque(maxlen=maxlen)
        self._numbers: deque[FloatingNumber] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def on_log(self, event: CombatEvent) -> None:
        self.append(event)

    def on_number(self, number: FloatingNumber) -> None:
        with self._lock:
            self._numbers.append(number)

    def append(self, event: CombatEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since_tick(self, tick: int) -> list[CombatEvent]:
        """Return all events with tick >= *tick*."""
        with self._lock:
            return [e for e in self._buffer if e.tick >= tick]

    def numbers_since_tick(self, tick: int) -> list[FloatingNumber]:
        with self._lock:
            return [n for n in self._numbers if n.tick >= tick]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
            self._numbers.clear()
