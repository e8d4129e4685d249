from __future__ import annotations

import logging
from typing import Any

from flask import request
from flask_socketio import SocketIO, emit

from ..game.errors import IllegalAction, RateLimited, RoomNotFound
from ..game.orchestrator import SessionOrchestrator


logger = logging.getLogger(__name__)


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 16:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _room_id(data: Any) -> str:
    # clear-canvas is sent with a bare room id by older clients.
    if isinstance(data, str):
        return data.strip()
    return str((data or {}).get("roomId", "")).strip()


def register_socketio_handlers(socketio: SocketIO, game: SessionOrchestrator) -> None:
    def _dropped(event: str, exc: Exception) -> None:
        logger.debug("[dropped] event=%s sid=%s reason=%s", event, request.sid, exc)

    @socketio.on("create-room")
    def create_room(data):
        payload = data or {}
        username = str(payload.get("username", "")).strip()
        if not _validate_name(username):
            emit("error-message", "Invalid username")
            return

        game.create(request.sid, username)

    @socketio.on("join-room")
    def join_room(data):
        payload = data or {}
        room_id = _room_id(payload)
        username = str(payload.get("username", "")).strip()
        if not room_id:
            emit("error-message", "Room does not exist")
            return
        if not _validate_name(username):
            emit("error-message", "Invalid username")
            return

        try:
            game.join(room_id, request.sid, username)
        except RoomNotFound:
            emit("error-message", "Room does not exist")
        except IllegalAction as exc:
            _dropped("join-room", exc)

    @socketio.on("leave-room")
    def leave_room(data):
        room_id = _room_id(data)
        if not room_id:
            return
        try:
            game.leave(room_id, request.sid)
        except IllegalAction as exc:
            _dropped("leave-room", exc)

    @socketio.on("select-word")
    def select_word(data):
        payload = data or {}
        room_id = _room_id(payload)
        word = payload.get("word")
        if not room_id or not isinstance(word, str):
            return
        try:
            game.select_word(room_id, request.sid, word)
        except IllegalAction as exc:
            _dropped("select-word", exc)

    @socketio.on("draw")
    def draw(data):
        payload = data or {}
        room_id = _room_id(payload)
        if not room_id:
            return
        try:
            game.draw(room_id, request.sid, payload.get("data"))
        except IllegalAction as exc:
            _dropped("draw", exc)

    @socketio.on("clear-canvas")
    def clear_canvas(data=None):
        room_id = _room_id(data)
        if not room_id:
            return
        try:
            game.clear_canvas(room_id, request.sid)
        except IllegalAction as exc:
            _dropped("clear-canvas", exc)

    @socketio.on("chat-message")
    def chat_message(data):
        payload = data or {}
        room_id = _room_id(payload)
        message = payload.get("message")
        if not room_id or not isinstance(message, str) or not message:
            return
        try:
            game.chat_message(room_id, request.sid, message)
        except (IllegalAction, RateLimited) as exc:
            _dropped("chat-message", exc)

    @socketio.on("disconnect")
    def on_disconnect(*_args):
        logger.info("[disconnect] sid=%s", request.sid)
        game.disconnect(request.sid)
