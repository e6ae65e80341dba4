"""Goal bingo cards: grid configuration, FREE placement and bingo detection."""

from .errors import CardError
from .models import BingoLine, CardConfiguration, CardStats, CloneResult, Displacement, Item, PlacementResult, SwapResult
from .version import __version__

__all__ = [
    "BingoLine",
    "CardConfiguration",
    "CardError",
    "CardStats",
    "CloneResult",
    "Displacement",
    "Item",
    "PlacementResult",
    "SwapResult",
    "__version__",
]
