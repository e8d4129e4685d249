from __future__ import annotations

import random
from collections.abc import Sequence

from .errors import WordSupplyExhausted


DEFAULT_WORDS = [
    "apple",
    "car",
    "house",
    "elephant",
    "computer",
    "guitar",
    "mountain",
    "ocean",
    "pizza",
    "football",
]


def pick_words(words: Sequence[str], count: int, rng: random.Random | None = None) -> list[str]:
    # Dedup while keeping order so the sample is over distinct words.
    pool = list(dict.fromkeys(w.strip() for w in words if w and w.strip()))
    if count > len(pool):
        raise WordSupplyExhausted(f"need {count} distinct words, only {len(pool)} available")
    return (rng or random).sample(pool, count)


class WordProvider:
    def __init__(self, words: Sequence[str] | None = None, rng: random.Random | None = None) -> None:
        self.words = list(words) if words is not None else list(DEFAULT_WORDS)
        self._rng = rng

    def candidates(self, count: int) -> list[str]:
        return pick_words(self.words, count, rng=self._rng)
