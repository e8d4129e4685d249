from __future__ import annotations

import logging

from . import announce
from .announce import Broadcaster
from .errors import IllegalAction, WordSupplyExhausted
from .models import Room
from .words import WordProvider


logger = logging.getLogger(__name__)


class TurnScheduler:
    def __init__(self, bus: Broadcaster, words: WordProvider, word_count: int = 3) -> None:
        self.bus = bus
        self.words = words
        self.word_count = word_count

    def start_turn(self, room: Room) -> None:
        with room.lock:
            if not room.participants:
                raise IllegalAction("cannot start a turn in an empty room")

            if room.drawer is None or room.find(room.drawer) is None:
                room.drawer = room.participants[0].handle

            try:
                options = self.words.candidates(self.word_count)
            except WordSupplyExhausted:
                # Leave no drawer behind so a later join can start over.
                room.drawer = None
                room.word = None
                room.word_options = []
                room.state = "idle"
                raise

            room.word_options = options
            room.word = None
            room.state = "selecting"

            logger.info("[turn-start] room=%s drawer=%s", room.room_id, room.drawer)

            announce.room_data(self.bus, room)
            self.bus.to_participant(room.drawer, "word-options", list(options))

    def rotate_drawer(self, room: Room, departed_index: int | None = None) -> None:
        with room.lock:
            count = len(room.participants)
            if count == 0:
                room.drawer = None
                room.word = None
                room.word_options = []
                room.state = "idle"
                return

            idx = room.index_of(room.drawer)
            if idx >= 0:
                next_idx = (idx + 1) % count
            elif departed_index is not None:
                # The departed drawer's slot is now held by whoever followed them.
                next_idx = departed_index % count
            else:
                next_idx = 0

            room.drawer = room.participants[next_idx].handle

            self.bus.to_room(room.room_id, "clear-canvas")
            self.start_turn(room)
