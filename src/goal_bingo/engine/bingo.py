from __future__ import annotations

from typing import Iterable, List

from .. import geometry
from ..models import BingoLine, CardConfiguration, Item


def completion_grid(config: CardConfiguration, items: Iterable[Item]) -> List[bool]:
    """Row-major flags: True for the FREE cell and for completed items."""
    grid = [False] * config.total_squares
    if config.has_free_space and config.free_space_position is not None:
        grid[config.free_space_position] = True
    for item in items:
        if item.is_completed and 0 <= item.position < len(grid):
            grid[item.position] = True
    return grid


def detect_bingos(config: CardConfiguration, items: Iterable[Item]) -> List[BingoLine]:
    """Every fully completed row, column and diagonal, in that order."""
    grid = completion_grid(config, items)
    return [
        BingoLine(kind=kind, index=index)
        for kind, index, positions in geometry.build_lines(config.grid_size)
        if all(grid[pos] for pos in positions)
    ]


def count_bingos(config: CardConfiguration, items: Iterable[Item]) -> int:
    return len(detect_bingos(config, items))
