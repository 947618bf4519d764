"""
Pytest fixtures for slide2048 tests.
"""

import random

import pytest

from ..config import GameConfig
from ..core import EMPTY, Board
from ..session import GameSession
from ..storage import InMemoryBestScoreStore


def random_board(rng: random.Random, size: int = 4, fill: float = 0.6, max_exponent: int = 4) -> Board:
    """A board with roughly `fill` of its cells holding small tiles, so merges are frequent."""
    return tuple(
        tuple(2 ** rng.randint(1, max_exponent) if rng.random() < fill else EMPTY for _ in range(size))
        for _ in range(size)
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(2048)


@pytest.fixture
def random_boards(rng):
    """A few hundred boards of mixed sizes and densities."""
    boards = []
    for _ in range(300):
        size = rng.choice([2, 3, 4, 5])
        boards.append(random_board(rng, size=size, fill=rng.choice([0.3, 0.7, 1.0])))
    return boards


@pytest.fixture
def store() -> InMemoryBestScoreStore:
    return InMemoryBestScoreStore()


@pytest.fixture
def session(store, rng) -> GameSession:
    return GameSession(GameConfig(size=4, target=2048), store, rng)
