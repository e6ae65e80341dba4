from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from ..models import CardConfiguration, Item, sort_items
from ..rng import RandomSource
from ..validation import check_items, ensure_draft

logger = logging.getLogger(__name__)


def fisher_yates(values: List[Item], rng: RandomSource) -> None:
    """In-place uniform permutation driven by ``rng.randint``."""
    for i in range(len(values) - 1, 0, -1):
        j = rng.randint(0, i)
        values[i], values[j] = values[j], values[i]


def shuffle_items(
    config: CardConfiguration, items: Sequence[Item], rng: RandomSource
) -> Tuple[Item, ...]:
    """Permute items over the positions they already occupy.

    FREE and empty cells are left alone; only which item sits where changes.
    """
    ensure_draft(config)
    current = check_items(config, items)
    positions = [it.position for it in current]
    order = list(current)
    fisher_yates(order, rng)
    logger.debug("Shuffled %d items over positions %s", len(order), positions)
    return sort_items(item.moved_to(pos) for item, pos in zip(order, positions))
