from __future__ import annotations

from typing import Any

from flask_socketio import SocketIO


class SocketIOBroadcaster:
    """Delivers game events through Flask-SocketIO rooms.

    Uses the server-level API so it works both inside event handlers and from
    background tasks such as the round timer.
    """

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self.socketio = socketio
        self.namespace = namespace

    def to_room(self, room_id: str, event: str, *args: Any, skip: str | None = None) -> None:
        self.socketio.emit(event, *args, to=room_id, skip_sid=skip, namespace=self.namespace)

    def to_participant(self, handle: str, event: str, *args: Any) -> None:
        self.socketio.emit(event, *args, to=handle, namespace=self.namespace)

    def enter(self, handle: str, room_id: str) -> None:
        self.socketio.server.enter_room(handle, room_id, namespace=self.namespace)

    def leave(self, handle: str, room_id: str) -> None:
        self.socketio.server.leave_room(handle, room_id, namespace=self.namespace)
