from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, Literal

from . import announce
from .announce import Broadcaster
from .errors import IllegalAction
from .models import Room
from .registry import RoomRegistry
from .timer import RoundTimer
from .turns import TurnScheduler


logger = logging.getLogger(__name__)


ResolveReason = Literal["timeout", "all-correct", "drawer-left"]

_REVEAL_MESSAGES = {
    "timeout": "Time's up! Word was: {word}",
    "all-correct": "Everyone guessed it! Word was: {word}",
    "drawer-left": "The drawer left! Word was: {word}",
}


class RoundLifecycle:
    """Starts rounds, counts them down and resolves them exactly once."""

    def __init__(
        self,
        registry: RoomRegistry,
        bus: Broadcaster,
        turns: TurnScheduler,
        start_task: Callable[..., Any],
        round_seconds: int = 30,
        sleep: Callable[[float], Any] = time.sleep,
        tick_interval: float = 1.0,
    ) -> None:
        self.registry = registry
        self.bus = bus
        self.turns = turns
        self.round_seconds = round_seconds
        self.start_task = start_task
        self.sleep = sleep
        self.tick_interval = tick_interval

    def start_round(self, room: Room, word: str) -> None:
        with room.lock:
            if room.state != "selecting" or word not in room.word_options:
                raise IllegalAction(f"word {word!r} is not on offer")

            if room.timer is not None:
                room.timer.cancel()

            room.word = word
            room.word_options = []
            room.remaining = self.round_seconds
            room.state = "active"
            room.correct_guessers = set()
            room.last_guess_at = {}
            room.generation += 1

            logger.info(
                "[round-start] room=%s drawer=%s generation=%s",
                room.room_id,
                room.drawer,
                room.generation,
            )

            self.bus.to_room(room.room_id, "timer-update", room.remaining)

            room.timer = RoundTimer(
                room.room_id,
                room.generation,
                on_tick=self.tick,
                start_task=self.start_task,
                sleep=self.sleep,
                interval=self.tick_interval,
            )
            room.timer.start()

    def tick(self, room_id: str, generation: int) -> bool:
        """Advance the countdown by one second. Returns False once the timer should stop."""
        room = self.registry.get(room_id)
        if room is None:
            return False

        with room.lock:
            if room.generation != generation or room.state != "active":
                return False
            if self.registry.get(room_id) is not room:
                return False

            room.remaining = max(0, room.remaining - 1)
            self.bus.to_room(room.room_id, "timer-update", room.remaining)

            if room.remaining > 0:
                return True

            self.try_resolve(room, "timeout")
            return False

    def try_resolve(self, room: Room, reason: ResolveReason, departed_index: int | None = None) -> bool:
        with room.lock:
            if room.state != "active":
                return False
            room.state = "resolving"

            if room.timer is not None:
                room.timer.cancel()
                room.timer = None

            word = room.word
            logger.info("[round-end] room=%s reason=%s word=%s", room.room_id, reason, word)
            announce.system_message(self.bus, room, _REVEAL_MESSAGES[reason].format(word=word))

            room.word = None
            room.state = "idle"
            room.correct_guessers = set()
            room.last_guess_at = {}

            self.turns.rotate_drawer(room, departed_index=departed_index)
            return True

    def stop(self, room: Room) -> None:
        """Abandon the game in a room that can no longer hold a round."""
        with room.lock:
            if room.state == "active" and room.word:
                announce.system_message(self.bus, room, f"Not enough players! Word was: {room.word}")
            if room.timer is not None:
                room.timer.cancel()
                room.timer = None
            room.drawer = None
            room.word = None
            room.word_options = []
            room.state = "idle"
            room.correct_guessers = set()
            room.last_guess_at = {}
            self.bus.to_room(room.room_id, "clear-canvas")
