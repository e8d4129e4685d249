from __future__ import annotations


class GameError(Exception):
    """Base class for rejected game actions."""


class AlreadyExists(GameError):
    pass


class RoomNotFound(GameError):
    def __init__(self, room_id: str) -> None:
        super().__init__(f"room {room_id!r} does not exist")
        self.room_id = room_id


class IllegalAction(GameError):
    """Wrong actor, wrong phase or stale client state. Dropped without a reply."""


class RateLimited(GameError):
    """Guess submitted inside the per-participant cooldown."""


class WordSupplyExhausted(GameError):
    """The word list cannot supply enough distinct candidates; no turn can start."""
