"""Mana regeneration with fractional carry-over."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from idle_combat.core.models import Character


class ManaAccumulator:
    """Converts a continuous per-second rate into whole mana points.

    The remainder is kept between ticks, so the total gained over a run
    depends only on the total time, not on how it was sliced.  Internally
    the carry is held in mana-milliseconds to keep millisecond ticks exact.
    """

    __slots__ = ("_accumulator",)

    def __init__(self) -> None:
        self._accumulator = 0.0

    @property
    def pending(self) -> float:
        """Fractional mana not yet credited."""
        return self._accumulator / 1000

    def update(self, character: Character, delta_ms: float) -> int:
        """Accrue regen for *delta_ms*.  Returns mana actually added."""
        if delta_ms <= 0:
            return 0
        self._accumulator += character.mana_regen * delta_ms
        if self._accumulator < 1000:
            return 0
        whole = math.floor(self._accumulator / 1000)
        self._accumulator -= whole * 1000
        return character.restore_mana(whole)
