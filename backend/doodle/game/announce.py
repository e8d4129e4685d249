from __future__ import annotations

from typing import Any, Protocol

from .models import Room


SYSTEM_NAME = "SYSTEM"


class Broadcaster(Protocol):
    def to_room(self, room_id: str, event: str, *args: Any, skip: str | None = None) -> None: ...

    def to_participant(self, handle: str, event: str, *args: Any) -> None: ...

    def enter(self, handle: str, room_id: str) -> None: ...

    def leave(self, handle: str, room_id: str) -> None: ...


def room_data(bus: Broadcaster, room: Room) -> None:
    bus.to_room(room.room_id, "room-data", room.public_state())


def chat(bus: Broadcaster, room: Room, username: str, message: str) -> None:
    bus.to_room(room.room_id, "chat-message", {"username": username, "message": message})


def system_message(bus: Broadcaster, room: Room, message: str) -> None:
    chat(bus, room, SYSTEM_NAME, message)


def mask_word(word: str) -> str:
    return " ".join("_" * len(word))
