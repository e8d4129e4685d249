from __future__ import annotations

import logging
from collections.abc import Callable

from ..utils.clock import now_ms
from . import announce
from .announce import Broadcaster
from .errors import IllegalAction, RateLimited
from .models import Room
from .rounds import RoundLifecycle


logger = logging.getLogger(__name__)


def normalize_guess(text: str) -> str:
    return text.strip().casefold()


class GuessEvaluator:
    def __init__(
        self,
        bus: Broadcaster,
        rounds: RoundLifecycle,
        cooldown_ms: int = 1000,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.bus = bus
        self.rounds = rounds
        self.cooldown_ms = cooldown_ms
        self.clock = clock

    def evaluate(self, room: Room, handle: str, name: str, message: str) -> bool:
        """Handle one chat submission. Returns True when it scored as a correct guess."""
        with room.lock:
            if room.state != "active" or not room.word:
                announce.chat(self.bus, room, name, message)
                return False

            if handle == room.drawer:
                raise IllegalAction("drawer cannot guess")

            now = self.clock()
            last = room.last_guess_at.get(handle)
            if last is not None and now - last < self.cooldown_ms:
                raise RateLimited(f"guess from {handle} inside cooldown")
            room.last_guess_at[handle] = now

            if normalize_guess(message) != normalize_guess(room.word):
                announce.chat(self.bus, room, name, message)
                return False

            if handle in room.correct_guessers:
                raise IllegalAction(f"{handle} already guessed this round")

            guesser = room.find(handle)
            drawer = room.find(room.drawer)
            if guesser is None or drawer is None:
                raise IllegalAction("guesser or drawer is no longer in the room")

            guesser_points = room.remaining * 2
            drawer_points = room.remaining
            guesser.score += guesser_points
            drawer.score += drawer_points
            room.correct_guessers.add(handle)

            logger.info(
                "[guess-correct] room=%s guesser=%s points=%s drawer_points=%s",
                room.room_id,
                handle,
                guesser_points,
                drawer_points,
            )

            announce.system_message(self.bus, room, f"{name} guessed the word! +{guesser_points} pts")
            announce.room_data(self.bus, room)

            if self.everyone_guessed(room):
                self.rounds.try_resolve(room, "all-correct")
            return True

    @staticmethod
    def everyone_guessed(room: Room) -> bool:
        guessers = len(room.participants) - 1
        return guessers > 0 and len(room.correct_guessers) >= guessers
