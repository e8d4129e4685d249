from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

bp = Blueprint("words", __name__)

MAX_COUNT = 10


@bp.get("/words")
def get_words():
    try:
        count = int(request.args.get("count", "3"))
    except ValueError:
        count = 3

    provider = current_app.extensions["doodle"].turns.words
    count = max(1, min(count, MAX_COUNT, len(set(provider.words))))

    return jsonify({"words": provider.candidates(count)})
