"""FREE cell placement: create, enable, disable and move.

Odd grids put FREE in the center, even grids on a random empty cell. When the
chosen cell holds an item, the item is moved to a random empty cell; if there
is none the operation fails with CardFull and nothing changes.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Tuple

from .. import geometry
from ..errors import CardFull, NotEnabled, AlreadyEnabled
from ..models import (
    CardConfiguration,
    Displacement,
    Item,
    PlacementResult,
    empty_positions,
    items_by_position,
    sort_items,
)
from ..rng import RandomSource
from ..validation import check_items, ensure_draft, ensure_position_in_range

logger = logging.getLogger(__name__)


def create_configuration(
    grid_size: int,
    header_text: Optional[str] = None,
    has_free_space: bool = True,
    *,
    rng: Optional[RandomSource] = None,
) -> CardConfiguration:
    """Build a fresh draft configuration.

    ``rng`` is only consulted for even grids with FREE enabled.
    """
    geometry.require_grid_size(grid_size)
    if header_text is None or not header_text.strip():
        header_text = geometry.default_header_text(grid_size)
    free_pos: Optional[int] = None
    if has_free_space:
        free_pos = geometry.center_position(grid_size)
        if free_pos is None:
            if rng is None:
                raise ValueError("an rng is required to place FREE on an even grid")
            free_pos = rng.randint(0, geometry.total_squares(grid_size) - 1)
    return CardConfiguration(
        grid_size=grid_size,
        header_text=header_text,
        has_free_space=free_pos is not None,
        free_space_position=free_pos,
    )


def relocate(items: Sequence[Item], from_pos: int, to_pos: int) -> Tuple[Item, ...]:
    return sort_items(it.moved_to(to_pos) if it.position == from_pos else it for it in items)


def _make_room(
    config: CardConfiguration,
    items: Tuple[Item, ...],
    target: int,
    rng: RandomSource,
) -> Tuple[Tuple[Item, ...], Optional[Displacement]]:
    """Clear ``target`` by moving its item to a random empty cell."""
    occupant: Dict[int, Item] = items_by_position(items)
    item = occupant.get(target)
    if item is None:
        return items, None
    candidates = [pos for pos in empty_positions(config, items) if pos != target]
    if not candidates:
        raise CardFull("no empty square to move the item to; remove an item to add a FREE space")
    dest = rng.choice(candidates)
    logger.debug("Displacing %r from %d to %d", item.content, target, dest)
    return relocate(items, target, dest), Displacement(item.content, target, dest)


def enable_free(
    config: CardConfiguration, items: Sequence[Item], rng: RandomSource
) -> PlacementResult:
    ensure_draft(config)
    if config.has_free_space:
        raise AlreadyEnabled()
    current = check_items(config, items)

    target = geometry.center_position(config.grid_size)
    if target is None:
        empties = empty_positions(config, current)
        if not empties:
            raise CardFull("no empty square for a FREE space; remove an item first")
        target = rng.choice(empties)

    moved, displaced = _make_room(config, current, target, rng)
    logger.info("FREE enabled at position %d", target)
    return PlacementResult(config=config.with_free(target), items=moved, displaced=displaced)


def disable_free(config: CardConfiguration) -> CardConfiguration:
    """Turn FREE off; its cell becomes an ordinary empty cell and no items move."""
    ensure_draft(config)
    if not config.has_free_space:
        raise NotEnabled()
    logger.info("FREE disabled (was at position %d)", config.free_space_position)
    return config.with_free(None)


def move_free(
    config: CardConfiguration, items: Sequence[Item], target: int, rng: RandomSource
) -> PlacementResult:
    ensure_draft(config)
    if not config.has_free_space:
        raise NotEnabled()
    ensure_position_in_range(config, target)
    current = check_items(config, items)
    if target == config.free_space_position:
        return PlacementResult(config=config, items=current)

    # the old FREE cell is not yet empty, so it is never a displacement target
    moved, displaced = _make_room(config, current, target, rng)
    logger.info("FREE moved from %d to %d", config.free_space_position, target)
    return PlacementResult(config=config.with_free(target), items=moved, displaced=displaced)
