from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable
from typing import Any

from ..utils.clock import now_ms
from . import announce
from .announce import Broadcaster
from .errors import IllegalAction
from .guesses import GuessEvaluator
from .models import Participant, Room
from .registry import Departure, RoomRegistry
from .rounds import RoundLifecycle
from .turns import TurnScheduler
from .words import WordProvider


logger = logging.getLogger(__name__)


MIN_PLAYERS = 2


class SessionOrchestrator:
    """Entry points for every participant action.

    Each method checks the action is legal for the room's current state and
    raises ``IllegalAction`` (or ``RateLimited`` for guesses) otherwise; the
    transport layer decides which of those reach the client.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        bus: Broadcaster,
        turns: TurnScheduler,
        rounds: RoundLifecycle,
        guesses: GuessEvaluator,
        make_room_id: Callable[[], str] = lambda: secrets.token_hex(4),
    ) -> None:
        self.registry = registry
        self.bus = bus
        self.turns = turns
        self.rounds = rounds
        self.guesses = guesses
        self.make_room_id = make_room_id

    @classmethod
    def build(
        cls,
        bus: Broadcaster,
        start_task: Callable[..., Any],
        sleep: Callable[[float], Any] = time.sleep,
        words: WordProvider | None = None,
        round_seconds: int = 30,
        word_count: int = 3,
        cooldown_ms: int = 1000,
        tick_interval: float = 1.0,
        room_id_bytes: int = 4,
        clock: Callable[[], int] = now_ms,
    ) -> SessionOrchestrator:
        registry = RoomRegistry()
        turns = TurnScheduler(bus, words or WordProvider(), word_count=word_count)
        rounds = RoundLifecycle(
            registry,
            bus,
            turns,
            start_task=start_task,
            round_seconds=round_seconds,
            sleep=sleep,
            tick_interval=tick_interval,
        )
        guesses = GuessEvaluator(bus, rounds, cooldown_ms=cooldown_ms, clock=clock)
        return cls(
            registry,
            bus,
            turns,
            rounds,
            guesses,
            make_room_id=lambda: secrets.token_hex(room_id_bytes),
        )

    def _room(self, room_id: str) -> Room:
        room = self.registry.get(room_id)
        if room is None:
            raise IllegalAction(f"room {room_id!r} is gone")
        return room

    def _require_drawer(self, room: Room, handle: str) -> None:
        if room.drawer is None or room.drawer != handle:
            raise IllegalAction(f"{handle} is not the drawer")

    def create(self, handle: str, name: str) -> str:
        room = self.registry.create_unique(self.make_room_id)
        self.registry.join(room.room_id, Participant(handle=handle, name=name))
        self.bus.enter(handle, room.room_id)

        logger.info("[room-created] room=%s creator=%s", room.room_id, name)

        self.bus.to_participant(handle, "room-created", room.room_id)
        announce.room_data(self.bus, room)
        return room.room_id

    def join(self, room_id: str, handle: str, name: str) -> Room:
        existing = self.registry.get(room_id)
        if existing is not None and existing.find(handle) is not None:
            raise IllegalAction(f"{handle} already in room {room_id}")

        # RoomNotFound propagates to the caller.
        room = self.registry.join(room_id, Participant(handle=handle, name=name))
        self.bus.enter(handle, room_id)

        logger.info("[player-joined] room=%s name=%s", room_id, name)

        with room.lock:
            announce.room_data(self.bus, room)
            if len(room.participants) >= MIN_PLAYERS and room.drawer is None:
                self.turns.start_turn(room)
        return room

    def select_word(self, room_id: str, handle: str, word: str) -> None:
        room = self._room(room_id)
        with room.lock:
            self._require_drawer(room, handle)
            if room.state != "selecting" or word not in room.word_options:
                raise IllegalAction(f"word {word!r} was not offered")

            self.bus.to_participant(handle, "word-selected", word)
            self.bus.to_room(room_id, "word-selected", announce.mask_word(word), skip=handle)
            self.rounds.start_round(room, word)

    def draw(self, room_id: str, handle: str, data: Any) -> None:
        room = self._room(room_id)
        with room.lock:
            self._require_drawer(room, handle)
            if room.state != "active":
                raise IllegalAction("no round in progress")
            self.bus.to_room(room_id, "draw", data, skip=handle)

    def clear_canvas(self, room_id: str, handle: str) -> None:
        room = self._room(room_id)
        with room.lock:
            self._require_drawer(room, handle)
            self.bus.to_room(room_id, "clear-canvas", skip=handle)

    def chat_message(self, room_id: str, handle: str, message: str) -> bool:
        room = self._room(room_id)
        with room.lock:
            sender = room.find(handle)
            if sender is None:
                raise IllegalAction(f"{handle} is not in room {room_id}")
            return self.guesses.evaluate(room, handle, sender.name, message)

    def leave(self, room_id: str, handle: str) -> None:
        room = self._room(room_id)
        # Removal and the departure policy share one critical section so a
        # timer tick cannot resolve the round in between.
        with room.lock:
            departure = self.registry.evict(room, handle)
            if departure is None:
                raise IllegalAction(f"{handle} is not in room {room_id}")
            self._after_departure(departure)

    def disconnect(self, handle: str) -> list[Departure]:
        departures = []
        for room in self.registry.rooms():
            with room.lock:
                departure = self.registry.evict(room, handle)
                if departure is not None:
                    self._after_departure(departure)
                    departures.append(departure)
        return departures

    def _after_departure(self, departure: Departure) -> None:
        room = departure.room
        handle = departure.participant.handle
        self.bus.leave(handle, room.room_id)

        logger.info(
            "[player-left] room=%s name=%s was_drawer=%s",
            room.room_id,
            departure.participant.name,
            departure.was_drawer,
        )

        if departure.destroyed:
            return

        with room.lock:
            if len(room.participants) < MIN_PLAYERS:
                self.rounds.stop(room)
            elif departure.was_drawer:
                if room.state == "active":
                    self.rounds.try_resolve(room, "drawer-left", departed_index=departure.index)
                else:
                    self.turns.rotate_drawer(room, departed_index=departure.index)
            elif room.state == "active" and self.guesses.everyone_guessed(room):
                self.rounds.try_resolve(room, "all-correct")

            announce.room_data(self.bus, room)
