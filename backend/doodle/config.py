import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Game
    ROUND_DURATION_SEC = int(os.environ.get("ROUND_DURATION_SEC", "30"))
    WORD_CHOICES_COUNT = int(os.environ.get("WORD_CHOICES_COUNT", "3"))
    GUESS_COOLDOWN_MS = int(os.environ.get("GUESS_COOLDOWN_MS", "1000"))
    TICK_INTERVAL_SEC = float(os.environ.get("TICK_INTERVAL_SEC", "1.0"))
    ROOM_ID_BYTES = int(os.environ.get("ROOM_ID_BYTES", "4"))

    # Round timers are not scheduled under TESTING unless this is set.
    ENABLE_TIMERS_IN_TESTS = os.environ.get("ENABLE_TIMERS_IN_TESTS", "0") == "1"
