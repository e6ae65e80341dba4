"""Draft -> Finalized transition.

There is no way back: a finalized configuration rejects every layout change
and only item completion may still be toggled.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Sequence

from ..errors import CapacityNotMet
from ..models import CardConfiguration, Item
from ..validation import check_items, ensure_draft

logger = logging.getLogger(__name__)


class CardState(Enum):
    DRAFT = "draft"
    FINALIZED = "finalized"


def card_state(config: CardConfiguration) -> CardState:
    return CardState.FINALIZED if config.is_finalized else CardState.DRAFT


def finalize(config: CardConfiguration, items: Sequence[Item]) -> CardConfiguration:
    ensure_draft(config)
    current = check_items(config, items)
    if len(current) != config.capacity:
        raise CapacityNotMet(
            f"card has {len(current)} of {config.capacity} squares filled; "
            "fill every square before finalizing"
        )
    logger.info("Card finalized (%dx%d, %d items)", config.grid_size, config.grid_size, len(current))
    return replace(config, is_finalized=True)
