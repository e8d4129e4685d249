from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from .timer import RoundTimer


RoundState = Literal["idle", "selecting", "active", "resolving"]


@dataclass
class Participant:
    handle: str
    name: str
    score: int = 0


@dataclass
class Room:
    room_id: str
    participants: list[Participant] = field(default_factory=list)
    drawer: str | None = None
    word: str | None = None
    word_options: list[str] = field(default_factory=list)
    state: RoundState = "idle"
    remaining: int = 0
    timer: RoundTimer | None = None
    correct_guessers: set[str] = field(default_factory=set)
    # handle -> ms timestamp of the last guess attempt this round
    last_guess_at: dict[str, int] = field(default_factory=dict)
    generation: int = 0
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def find(self, handle: str | None) -> Participant | None:
        for p in self.participants:
            if p.handle == handle:
                return p
        return None

    def index_of(self, handle: str | None) -> int:
        for i, p in enumerate(self.participants):
            if p.handle == handle:
                return i
        return -1

    def public_state(self) -> dict:
        return {
            "players": [{"id": p.handle, "name": p.name, "score": p.score} for p in self.participants],
            "drawer": self.drawer,
            "state": self.state,
        }
