"""Structural checks shared by the engine entry points."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .errors import AlreadyFinalized, CardFull, InvalidItem, PositionOccupied, PositionOutOfRange
from .models import CardConfiguration, Item, sort_items


def ensure_draft(config: CardConfiguration) -> None:
    if config.is_finalized:
        raise AlreadyFinalized()


def ensure_position_in_range(config: CardConfiguration, pos: int) -> None:
    if isinstance(pos, bool) or not isinstance(pos, int) or not 0 <= pos < config.total_squares:
        raise PositionOutOfRange(
            f"position {pos!r} is outside a {config.grid_size}x{config.grid_size} grid "
            f"(0..{config.total_squares - 1})"
        )


def check_items(config: CardConfiguration, items: Iterable[Item]) -> Tuple[Item, ...]:
    """Validate an item snapshot against ``config`` and return it sorted by position.

    Raises on the first violation found.
    """
    seen: set[int] = set()
    checked: List[Item] = []
    for item in items:
        if not isinstance(item, Item):
            raise InvalidItem(f"expected Item, got {type(item).__name__}")
        ensure_position_in_range(config, item.position)
        if config.is_free_position(item.position):
            raise PositionOccupied(f"position {item.position} is the FREE space")
        if item.position in seen:
            raise PositionOccupied(f"more than one item at position {item.position}")
        seen.add(item.position)
        checked.append(item)
    if len(checked) > config.capacity:
        raise CardFull(f"{len(checked)} items exceed the card capacity of {config.capacity}")
    return sort_items(checked)
