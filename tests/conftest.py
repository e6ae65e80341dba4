from __future__ import annotations

from typing import List, Sequence

import pytest

from goal_bingo.models import CardConfiguration, Item
from goal_bingo.rng import RandomSource, create_rng


class FirstPickSource(RandomSource):
    """Always picks the lowest option; makes placement outcomes predictable."""

    def __init__(self) -> None:
        super().__init__(engine="first_pick", seed=0)

    def randint(self, a: int, b: int) -> int:
        return a

    def random(self) -> float:
        return 0.0

    def choice(self, seq: Sequence):
        return seq[0]

    def shuffle(self, arr: List) -> None:
        return None

    def sample(self, seq: Sequence, k: int) -> List:
        return list(seq)[:k]


@pytest.fixture
def first_pick() -> FirstPickSource:
    return FirstPickSource()


@pytest.fixture
def rng():
    return create_rng("py_random", 20250824)


def _fill(config: CardConfiguration, count: int | None = None, *, completed=()) -> tuple[Item, ...]:
    """Items 'goal-<pos>' on the first ``count`` non-FREE cells (all of them by default)."""
    positions = [p for p in range(config.total_squares) if not config.is_free_position(p)]
    if count is not None:
        positions = positions[:count]
    return tuple(Item(position=p, content=f"goal-{p}", is_completed=p in completed) for p in positions)


@pytest.fixture
def fill():
    return _fill
