"""Card engine: placement, shuffling, swapping, bingo detection, finalize and clone."""

from .bingo import count_bingos, detect_bingos
from .clone import clone_card
from .finalize import CardState, card_state, finalize
from .items import (
    add_item,
    change_grid_size,
    remove_item,
    set_completed,
    update_config,
    update_header,
    update_item,
)
from .placement import create_configuration, disable_free, enable_free, move_free
from .progress import card_stats, recommend_items
from .shuffle import shuffle_items
from .swap import swap_positions

__all__ = [
    "CardState",
    "add_item",
    "card_state",
    "card_stats",
    "change_grid_size",
    "clone_card",
    "count_bingos",
    "create_configuration",
    "detect_bingos",
    "disable_free",
    "enable_free",
    "finalize",
    "move_free",
    "recommend_items",
    "remove_item",
    "set_completed",
    "shuffle_items",
    "swap_positions",
    "update_config",
    "update_header",
    "update_item",
]
