import pytest

from doodle.game.errors import IllegalAction, RateLimited
from doodle.game.guesses import normalize_guess


def _scores(room):
    return {p.handle: p.score for p in room.participants}


def test_chat_outside_round_is_plain(game, bus):
    room_id = game.create("A", "alice")
    assert game.chat_message(room_id, "A", "hello there") is False
    assert bus.last("chat-message")["args"][0] == {"username": "alice", "message": "hello there"}


def test_chat_during_selection_is_plain(game, bus):
    room_id = game.create("A", "alice")
    game.join(room_id, "B", "bob")
    assert game.chat_message(room_id, "B", "apple") is False
    assert bus.last("chat-message")["args"][0] == {"username": "bob", "message": "apple"}


def test_wrong_guess_is_visible_chat(game, bus, active_round):
    room = active_round(word="car")
    bus.clear()

    assert game.chat_message(room.room_id, "B", "  Bus ") is False

    assert bus.last("chat-message")["args"][0] == {"username": "b", "message": "  Bus "}
    assert _scores(room) == {"A": 0, "B": 0}


def test_drawer_cannot_guess(game, bus, active_round):
    room = active_round(word="car")
    bus.clear()
    with pytest.raises(IllegalAction):
        game.chat_message(room.room_id, "A", "car")
    assert bus.sent == []
    assert _scores(room) == {"A": 0, "B": 0}


def test_non_member_cannot_chat(game, active_round):
    room = active_round(word="car")
    with pytest.raises(IllegalAction):
        game.chat_message(room.room_id, "Z", "car")


def test_cooldown_drops_rapid_guesses(game, bus, clock, active_round):
    room = active_round(handles=("A", "B", "C"), word="car")
    assert game.chat_message(room.room_id, "B", "bus") is False

    clock.advance(999)
    with pytest.raises(RateLimited):
        game.chat_message(room.room_id, "B", "car")
    assert _scores(room)["B"] == 0

    clock.advance(1)
    assert game.chat_message(room.room_id, "B", "car") is True


def test_cooldown_is_per_participant(game, clock, active_round):
    room = active_round(handles=("A", "B", "C"), word="car")
    game.chat_message(room.room_id, "B", "bus")
    assert game.chat_message(room.room_id, "C", "car") is True


def test_repeated_correct_guess_scores_once(game, clock, active_round):
    room = active_round(handles=("A", "B", "C"), word="apple")

    assert game.chat_message(room.room_id, "B", "apple") is True
    with pytest.raises(RateLimited):
        game.chat_message(room.room_id, "B", "apple")

    clock.advance(5000)
    with pytest.raises(IllegalAction):
        game.chat_message(room.room_id, "B", "apple")

    assert _scores(room) == {"A": 30, "B": 60, "C": 0}
    assert room.state == "active"


def test_match_ignores_case_and_surrounding_space(game):
    game.turns.words.words = ["Apple", "car", "house"]
    room_id = game.create("A", "alice")
    game.join(room_id, "B", "bob")
    game.select_word(room_id, "A", "Apple")

    assert game.chat_message(room_id, "B", " apple ") is True


def test_normalize_guess():
    assert normalize_guess("  ÉLAN\t") == normalize_guess("élan")
    assert normalize_guess("Straße") == normalize_guess("STRASSE")


def test_two_player_scenario_resolves_on_guess(game, bus, active_round):
    room = active_round(word="house")
    room.remaining = 5
    bus.clear()

    assert game.chat_message(room.room_id, "B", "house") is True

    assert _scores(room) == {"A": 5, "B": 10}
    messages = [m["args"][0]["message"] for m in bus.events("chat-message")]
    assert messages[0] == "b guessed the word! +10 pts"
    assert messages[1] == "Everyone guessed it! Word was: house"
    # Round over without waiting for the timer; B draws next.
    assert room.drawer == "B"
    assert room.state == "selecting"
    assert room.correct_guessers == set()


def test_score_data_broadcast_after_correct_guess(game, bus, active_round):
    room = active_round(handles=("A", "B", "C"), word="car")
    room.remaining = 12
    bus.clear()

    game.chat_message(room.room_id, "C", "car")

    players = bus.last("room-data")["args"][0]["players"]
    assert players == [
        {"id": "A", "name": "a", "score": 12},
        {"id": "B", "name": "b", "score": 0},
        {"id": "C", "name": "c", "score": 24},
    ]


def test_guess_at_zero_scores_nothing(game, active_round):
    room = active_round(handles=("A", "B", "C"), word="car")
    room.remaining = 0

    assert game.chat_message(room.room_id, "B", "car") is True
    assert _scores(room) == {"A": 0, "B": 0, "C": 0}


def test_round_waits_for_every_guesser(game, clock, active_round):
    room = active_round(handles=("A", "B", "C"), word="car")

    game.chat_message(room.room_id, "B", "car")
    assert room.state == "active"

    game.chat_message(room.room_id, "C", "car")
    assert room.state == "selecting"
    assert room.drawer == "B"


def test_missing_drawer_record_drops_guess(game, active_round):
    room = active_round(handles=("A", "B", "C"), word="car")
    room.drawer = "ghost"
    with pytest.raises(IllegalAction):
        game.guesses.evaluate(room, "B", "b", "car")
    assert _scores(room) == {"A": 0, "B": 0, "C": 0}
