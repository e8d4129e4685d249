from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any


logger = logging.getLogger(__name__)


class RoundTimer:
    """One-second countdown task owned by a single room.

    The timer is stamped with the room generation it was started for. The
    tick callback receives ``(room_id, generation)`` and returns ``False``
    once the round it belongs to is over, which ends the loop. ``cancel`` is
    idempotent and stops the loop before its next tick.
    """

    def __init__(
        self,
        room_id: str,
        generation: int,
        on_tick: Callable[[str, int], bool],
        start_task: Callable[..., Any],
        sleep: Callable[[float], Any],
        interval: float = 1.0,
    ) -> None:
        self.room_id = room_id
        self.generation = generation
        self._on_tick = on_tick
        self._start_task = start_task
        self._sleep = sleep
        self.interval = interval
        self.cancelled = False
        self.started = False

    def start(self) -> None:
        if self.started or self.cancelled:
            return
        self.started = True
        self._start_task(self._run)

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return self.started and not self.cancelled

    def _run(self) -> None:
        while not self.cancelled:
            self._sleep(self.interval)
            if self.cancelled:
                break
            if not self._on_tick(self.room_id, self.generation):
                break
        logger.debug("[timer-stop] room=%s generation=%s", self.room_id, self.generation)
