from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .. import geometry
from ..models import CardConfiguration, CloneResult, Item, empty_positions, sort_items
from ..rng import RandomSource
from ..validation import check_items
from .placement import create_configuration

logger = logging.getLogger(__name__)


def clone_card(
    config: CardConfiguration,
    items: Sequence[Item],
    target_grid_size: int,
    target_has_free: bool,
    rng: RandomSource,
    *,
    header_text: Optional[str] = None,
) -> CloneResult:
    """Copy item contents from a source card into a fresh draft layout.

    Completion state is never copied. Contents are taken in source position
    order and each lands on a random empty cell; anything beyond the target
    capacity is dropped and reported through ``truncated``.
    """
    geometry.require_grid_size(target_grid_size)
    source = check_items(config, items)

    if header_text is None and len(config.header_text) <= target_grid_size:
        header_text = config.header_text
    target = create_configuration(
        target_grid_size, header_text, target_has_free, rng=rng
    )

    cloned: List[Item] = []
    for item in source[: target.capacity]:
        pos = rng.choice(empty_positions(target, cloned))
        cloned.append(Item(position=pos, content=item.content))

    dropped = tuple(item.content for item in source[target.capacity :])
    if dropped:
        logger.info(
            "Clone truncated: %d of %d items fit a %dx%d card",
            target.capacity,
            len(source),
            target_grid_size,
            target_grid_size,
        )
    return CloneResult(config=target, items=sort_items(cloned), truncated=bool(dropped), dropped=dropped)
