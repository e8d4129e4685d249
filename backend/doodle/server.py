from __future__ import annotations

import os
import sys

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.orchestrator import SessionOrchestrator
from .realtime.broadcast import SocketIOBroadcaster
from .realtime.handlers import register_socketio_handlers
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .routes.words import bp as words_bp


def _default_async_mode() -> str:
    env_async_mode = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()
    if env_async_mode:
        return env_async_mode
    # - Windows: threading (eventlet has known compatibility issues on newer Python)
    # - Python >= 3.13: threading (safer default)
    # - Otherwise: eventlet
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class: type = Config) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    async_mode = "threading" if app.config.get("TESTING") else _default_async_mode()
    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=async_mode,
    )

    timers_enabled = not app.config.get("TESTING") or app.config.get("ENABLE_TIMERS_IN_TESTS")

    def start_task(fn):
        if timers_enabled:
            socketio.start_background_task(fn)

    game = SessionOrchestrator.build(
        SocketIOBroadcaster(socketio),
        start_task=start_task,
        sleep=socketio.sleep,
        round_seconds=app.config["ROUND_DURATION_SEC"],
        word_count=app.config["WORD_CHOICES_COUNT"],
        cooldown_ms=app.config["GUESS_COOLDOWN_MS"],
        tick_interval=app.config["TICK_INTERVAL_SEC"],
        room_id_bytes=app.config["ROOM_ID_BYTES"],
    )
    app.extensions["doodle"] = game

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")
    app.register_blueprint(words_bp, url_prefix="/api")

    register_socketio_handlers(socketio, game)

    return app, socketio
