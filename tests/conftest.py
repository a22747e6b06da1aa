import random

import pytest

from board_engine import BoardEngine


class FixedRandom:
    """Always picks the first candidate cell and rolls a constant."""

    def __init__(self, roll=0.0):
        self.roll = roll

    def choice(self, seq):
        return seq[0]

    def random(self):
        return self.roll


class CyclingRandom:
    """Rolls 0.0, 0.1, ..., 0.9 in turn, so exactly one roll in ten lands at or above 0.9."""

    def __init__(self):
        self._step = 0

    def choice(self, seq):
        return seq[0]

    def random(self):
        roll = (self._step % 10) / 10
        self._step += 1
        return roll


@pytest.fixture
def fixed_rng():
    return FixedRandom()


@pytest.fixture
def cycling_rng():
    return CyclingRandom()


@pytest.fixture
def seeded_rng():
    return random.Random(2048)


@pytest.fixture
def events():
    return {"scores": [], "game_over": 0}


@pytest.fixture
def engine(fixed_rng, events):
    def on_game_over():
        events["game_over"] += 1

    return BoardEngine(
        rng=fixed_rng,
        on_score_change=events["scores"].append,
        on_game_over=on_game_over,
    )
