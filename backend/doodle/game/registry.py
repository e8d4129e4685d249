from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from threading import RLock

from .errors import AlreadyExists, RoomNotFound
from .models import Participant, Room


logger = logging.getLogger(__name__)


@dataclass
class Departure:
    room: Room
    participant: Participant
    index: int
    was_drawer: bool
    destroyed: bool


class RoomRegistry:
    """Owns the room id -> Room mapping.

    Lock order: a room's lock may be held while taking the registry lock,
    never the other way round.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def create(self, room_id: str) -> Room:
        with self._lock:
            if room_id in self._rooms:
                raise AlreadyExists(room_id)
            room = Room(room_id=room_id)
            self._rooms[room_id] = room
            return room

    def create_unique(self, make_id: Callable[[], str]) -> Room:
        with self._lock:
            room_id = make_id()
            while room_id in self._rooms:
                room_id = make_id()
            return self.create(room_id)

    def get(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def join(self, room_id: str, participant: Participant) -> Room:
        room = self.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)

        with room.lock:
            # The room may have been destroyed between lookup and lock.
            if self.get(room_id) is not room:
                raise RoomNotFound(room_id)
            room.participants.append(participant)
        return room

    def remove(self, handle: str) -> list[Departure]:
        departures = []
        for room in self.rooms():
            departure = self.evict(room, handle)
            if departure is not None:
                departures.append(departure)
        return departures

    def remove_from(self, room_id: str, handle: str) -> Departure | None:
        room = self.get(room_id)
        if room is None:
            return None
        return self.evict(room, handle)

    def evict(self, room: Room, handle: str) -> Departure | None:
        with room.lock:
            idx = room.index_of(handle)
            if idx < 0:
                return None

            participant = room.participants.pop(idx)
            was_drawer = room.drawer == handle
            if was_drawer:
                room.drawer = None
            room.correct_guessers.discard(handle)
            room.last_guess_at.pop(handle, None)

            destroyed = not room.participants
            if destroyed:
                self._destroy(room)

            return Departure(
                room=room,
                participant=participant,
                index=idx,
                was_drawer=was_drawer,
                destroyed=destroyed,
            )

    def _destroy(self, room: Room) -> None:
        if room.timer is not None:
            room.timer.cancel()
            room.timer = None
        room.state = "idle"
        room.word = None
        room.word_options = []
        with self._lock:
            if self._rooms.get(room.room_id) is room:
                del self._rooms[room.room_id]
        logger.info("[room-destroyed] room=%s", room.room_id)
