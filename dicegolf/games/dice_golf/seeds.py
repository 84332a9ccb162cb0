"""Seed derivation for daily and random courses."""

from __future__ import annotations

import random
from datetime import date

RANDOM_SEED_LIMIT = 1_000_000


def daily_seed(day: date) -> int:
    """Everyone playing on *day* gets the same course."""
    return day.year * 10000 + day.month * 100 + day.day


def random_seed(rng: random.Random | None = None) -> int:
    return (rng or random).randrange(RANDOM_SEED_LIMIT)
