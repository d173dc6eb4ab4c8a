"""Deferred bonus strikes — scheduled work that resolves on a later tick.

A proc schedules its extra strikes a little after the triggering attack.
Each task remembers which enemy and which player life it was aimed at;
if the enemy has been replaced or the caster has died before the task is
due, the task is dropped instead of hitting a stale target.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(order=True, slots=True)
class DeferredStrike:
    """One pending bonus strike."""

    due_ms: float
    task_id: int
    enemy_generation: int = field(compare=False)
    player_generation: int = field(compare=False)
    label: str = field(default="", compare=False)
    callback: Callable[[], None] = field(default=lambda: None, compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)


class DeferredScheduler:
    """Min-heap of DeferredStrikes ordered by (due_ms, task_id)."""

    __slots__ = ("_tasks", "_ids")

    def __init__(self) -> None:
        self._tasks: list[DeferredStrike] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return sum(1 for t in self._tasks if not t.cancelled)

    def schedule(
        self,
        due_ms: float,
        enemy_generation: int,
        player_generation: int,
        callback: Callable[[], None],
        label: str = "",
    ) -> DeferredStrike:
        task = DeferredStrike(
            due_ms=due_ms,
            task_id=next(self._ids),
            enemy_generation=enemy_generation,
            player_generation=player_generation,
            label=label,
            callback=callback,
        )
        heapq.heappush(self._tasks, task)
        return task

    def cancel(self, task: DeferredStrike) -> None:
        task.cancelled = True

    def cancel_all(self) -> int:
        """Cancel every pending task.  Returns how many were live."""
        live = len(self)
        self._tasks.clear()
        return live

    def run_due(self, now_ms: float, enemy_generation: int, player_generation: int) -> int:
        """Fire every task due at or before *now_ms*, in schedule order.

        Tasks aimed at a replaced enemy or a previous player life are
        discarded.  Returns the number of callbacks actually run.
        """
        fired = 0
        while self._tasks and self._tasks[0].due_ms <= now_ms:
            task = heapq.heappop(self._tasks)
            if task.cancelled:
                continue
            if task.enemy_generation != enemy_generation or task.player_generation != player_generation:
                logger.debug(
                    "Dropping stale deferred strike %d (%s): enemy gen %d→%d, player gen %d→%d",
                    task.task_id, task.label,
                    task.enemy_generation, enemy_generation,
                    task.player_generation, player_generation,
                )
                continue
            task.callback()
            fired += 1
        return fired
