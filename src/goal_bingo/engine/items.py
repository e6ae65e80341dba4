"""Item and header editing for draft cards, plus completion toggling."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from .. import geometry
from ..errors import CardFull, ItemNotFound, PositionOccupied, PositionOutOfRange
from ..models import CardConfiguration, Item, PlacementResult, empty_positions, items_by_position, sort_items
from ..rng import RandomSource
from ..validation import check_items, ensure_draft, ensure_position_in_range
from .placement import create_configuration, disable_free, enable_free

logger = logging.getLogger(__name__)


def _ensure_item_slot(config: CardConfiguration, items: Tuple[Item, ...], pos: int) -> None:
    ensure_position_in_range(config, pos)
    if config.is_free_position(pos):
        raise PositionOutOfRange(f"position {pos} is the FREE space")
    if pos in items_by_position(items):
        raise PositionOccupied(f"position {pos} already holds an item")


def add_item(
    config: CardConfiguration,
    items: Sequence[Item],
    content: str,
    position: Optional[int] = None,
    *,
    rng: Optional[RandomSource] = None,
) -> Tuple[Item, ...]:
    """Add an item at ``position``, or at a random empty cell when omitted."""
    ensure_draft(config)
    current = check_items(config, items)
    if len(current) >= config.capacity:
        raise CardFull("the card is full; remove an item before adding another")
    if position is None:
        if rng is None:
            raise ValueError("an rng is required when no position is given")
        position = rng.choice(empty_positions(config, current))
    else:
        _ensure_item_slot(config, current, position)
    new_item = Item(position=position, content=content)
    logger.debug("Added item at %d", position)
    return sort_items(current + (new_item,))


def update_item(
    config: CardConfiguration,
    items: Sequence[Item],
    position: int,
    *,
    content: Optional[str] = None,
    new_position: Optional[int] = None,
) -> Tuple[Item, ...]:
    ensure_draft(config)
    current = check_items(config, items)
    item = items_by_position(current).get(position)
    if item is None:
        raise ItemNotFound(f"no item at position {position}")
    updated = item
    if content is not None:
        updated = replace(updated, content=content)
    if new_position is not None and new_position != position:
        _ensure_item_slot(config, current, new_position)
        updated = updated.moved_to(new_position)
    return sort_items(updated if it is item else it for it in current)


def remove_item(config: CardConfiguration, items: Sequence[Item], position: int) -> Tuple[Item, ...]:
    ensure_draft(config)
    current = check_items(config, items)
    if position not in items_by_position(current):
        raise ItemNotFound(f"no item at position {position}")
    return tuple(it for it in current if it.position != position)


def set_completed(
    config: CardConfiguration, items: Sequence[Item], position: int, completed: bool = True
) -> Tuple[Item, ...]:
    """Toggle completion; allowed on draft and finalized cards alike."""
    current = check_items(config, items)
    item = items_by_position(current).get(position)
    if item is None:
        raise ItemNotFound(f"no item at position {position}")
    if item.is_completed == completed:
        return current
    return sort_items(replace(it, is_completed=completed) if it is item else it for it in current)


def update_header(config: CardConfiguration, header_text: str) -> CardConfiguration:
    ensure_draft(config)
    return replace(config, header_text=geometry.validate_header_text(header_text, config.grid_size))


def change_grid_size(
    config: CardConfiguration,
    items: Sequence[Item],
    grid_size: int,
    *,
    rng: Optional[RandomSource] = None,
) -> CardConfiguration:
    """Switch an empty draft card to another grid size.

    The header is kept when it still fits, otherwise reset to the default.
    """
    ensure_draft(config)
    geometry.require_grid_size(grid_size)
    if check_items(config, items):
        raise PositionOccupied("remove all items before changing the grid size")
    if grid_size == config.grid_size:
        return config
    header = config.header_text if len(config.header_text) <= grid_size else None
    return create_configuration(grid_size, header, config.has_free_space, rng=rng)


def update_config(
    config: CardConfiguration,
    items: Sequence[Item],
    *,
    header_text: Optional[str] = None,
    has_free_space: Optional[bool] = None,
    rng: Optional[RandomSource] = None,
) -> PlacementResult:
    """Apply a header edit and/or FREE toggle; both apply or neither does."""
    ensure_draft(config)
    current = check_items(config, items)
    updated = config
    if header_text is not None:
        updated = update_header(updated, header_text)
    if has_free_space is None or has_free_space == updated.has_free_space:
        return PlacementResult(config=updated, items=current)
    if not has_free_space:
        return PlacementResult(config=disable_free(updated), items=current)
    if rng is None:
        raise ValueError("an rng is required to enable FREE")
    return enable_free(updated, current, rng)
