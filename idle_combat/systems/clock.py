"""Clock — turns wall-clock timestamps into per-tick deltas."""

from __future__ import annotations


class CombatClock:
    """Tracks the last update timestamp and the total simulated time.

    The clock never scales time.  A driver that wants fast-forward simply
    ticks more often; the core only ever sees raw millisecond deltas.
    """

    __slots__ = ("_last_update", "_elapsed", "_tick_number")

    def __init__(self, now_ms: float = 0.0) -> None:
        self._last_update = now_ms
        self._elapsed = 0.0
        self._tick_number = 0

    @property
    def last_update(self) -> float:
        return self._last_update

    @property
    def elapsed_ms(self) -> float:
        """Total combat time credited so far."""
        return self._elapsed

    @property
    def tick_number(self) -> int:
        return self._tick_number

    def delta(self, now_ms: float) -> float:
        """Return ``now - last_update`` clamped to >= 0 and rebase to *now*."""
        dt = max(0.0, now_ms - self._last_update)
        self._last_update = now_ms
        return dt

    def resync(self, now_ms: float) -> None:
        """Rebase to *now* without crediting any elapsed time (pause → resume)."""
        self._last_update = now_ms

    def advance(self, delta_ms: float) -> int:
        """Credit *delta_ms* of combat time and count one tick."""
        self._elapsed += max(0.0, delta_ms)
        self._tick_number += 1
        return self._tick_number
