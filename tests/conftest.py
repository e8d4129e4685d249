import pytest

from doodle.config import Config
from doodle.game.orchestrator import SessionOrchestrator
from doodle.game.words import WordProvider
from doodle.server import create_app


class RecordingBroadcaster:
    """Captures everything the game core would send over the wire."""

    def __init__(self):
        self.sent = []
        self.members = {}

    def to_room(self, room_id, event, *args, skip=None):
        self.sent.append({"to": room_id, "event": event, "args": args, "skip": skip})

    def to_participant(self, handle, event, *args):
        self.sent.append({"to": handle, "event": event, "args": args, "skip": None})

    def enter(self, handle, room_id):
        self.members.setdefault(room_id, set()).add(handle)

    def leave(self, handle, room_id):
        self.members.get(room_id, set()).discard(handle)

    def events(self, event, to=None):
        return [m for m in self.sent if m["event"] == event and (to is None or m["to"] == to)]

    def last(self, event, to=None):
        found = self.events(event, to)
        return found[-1] if found else None

    def clear(self):
        self.sent.clear()


class ManualTasks:
    """Collects background tasks instead of running them."""

    def __init__(self):
        self.started = []

    def __call__(self, fn):
        self.started.append(fn)


class FakeClock:
    def __init__(self, start=10_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture()
def bus():
    return RecordingBroadcaster()


@pytest.fixture()
def tasks():
    return ManualTasks()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def game(bus, tasks, clock):
    ids = iter(f"room{i}" for i in range(1, 100))
    orchestrator = SessionOrchestrator.build(
        bus,
        start_task=tasks,
        sleep=lambda _sec: None,
        words=WordProvider(["apple", "car", "house"]),
        clock=clock,
    )
    orchestrator.make_room_id = lambda: next(ids)
    return orchestrator


@pytest.fixture()
def active_round(game):
    def _start(handles=("A", "B"), word=None):
        """Create a room with the given participants and start a round.

        The first handle creates the room and is the first drawer.
        """
        room_id = game.create(handles[0], handles[0].lower())
        for handle in handles[1:]:
            game.join(room_id, handle, handle.lower())
        room = game.registry.get(room_id)
        game.select_word(room_id, room.drawer, word or room.word_options[0])
        return room

    return _start


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    TRUST_PROXY_HEADERS = False
    ROUND_DURATION_SEC = 30
    WORD_CHOICES_COUNT = 3
    GUESS_COOLDOWN_MS = 1000
    ENABLE_TIMERS_IN_TESTS = False


@pytest.fixture()
def app_and_socketio():
    return create_app(TestingConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_clients(flask_app, socketio):
    clients = []

    def connect():
        c = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield connect

    for c in clients:
        if c.is_connected():
            c.disconnect()
