from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<room_id>")
def get_room(room_id: str):
    room = current_app.extensions["doodle"].registry.get(room_id)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    with room.lock:
        payload = room.public_state()
    payload["roomId"] = room.room_id
    return jsonify(payload)
