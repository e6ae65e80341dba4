from __future__ import annotations

import logging
from typing import Sequence

from ..models import CardConfiguration, Item, SwapResult, items_by_position, sort_items
from ..rng import RandomSource
from ..validation import check_items, ensure_draft, ensure_position_in_range
from .placement import move_free

logger = logging.getLogger(__name__)


def swap_positions(
    config: CardConfiguration,
    items: Sequence[Item],
    pos_a: int,
    pos_b: int,
    rng: RandomSource,
) -> SwapResult:
    """Exchange what sits at two positions.

    If one side is the FREE cell, FREE moves to the other side with the usual
    displacement rules, so this can fail with CardFull.
    """
    ensure_draft(config)
    ensure_position_in_range(config, pos_a)
    ensure_position_in_range(config, pos_b)
    current = check_items(config, items)

    a_free = config.is_free_position(pos_a)
    b_free = config.is_free_position(pos_b)
    if a_free and b_free:
        return SwapResult(config=config, items=current)
    if a_free or b_free:
        target = pos_b if a_free else pos_a
        placed = move_free(config, current, target, rng)
        return SwapResult(config=placed.config, items=placed.items, displaced=placed.displaced)

    by_pos = items_by_position(current)
    item_a = by_pos.get(pos_a)
    item_b = by_pos.get(pos_b)
    if pos_a == pos_b or (item_a is None and item_b is None):
        return SwapResult(config=config, items=current)

    swapped = []
    for item in current:
        if item is item_a:
            swapped.append(item.moved_to(pos_b))
        elif item is item_b:
            swapped.append(item.moved_to(pos_a))
        else:
            swapped.append(item)
    logger.debug("Swapped positions %d and %d", pos_a, pos_b)
    return SwapResult(config=config, items=sort_items(swapped))
