"""Card snapshots and operation results.

All records are frozen; engine operations build new ones instead of
mutating what they were given.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple

from . import geometry
from .errors import InvalidFreeSpace, InvalidItem, PositionOutOfRange


@dataclass(frozen=True)
class CardConfiguration:
    """Validated grid shape, header and FREE cell of one card.

    ``has_free_space`` and ``free_space_position`` are checked together here so
    a FREE flag without a position (or the reverse) cannot be constructed.
    """

    grid_size: int
    header_text: str
    has_free_space: bool = False
    free_space_position: Optional[int] = None
    is_finalized: bool = False

    def __post_init__(self) -> None:
        geometry.require_grid_size(self.grid_size)
        object.__setattr__(
            self, "header_text", geometry.validate_header_text(self.header_text, self.grid_size)
        )
        pos = self.free_space_position
        if pos is not None and (isinstance(pos, bool) or not isinstance(pos, int)):
            raise PositionOutOfRange(f"FREE position must be an integer, got {pos!r}")
        if self.has_free_space != (pos is not None):
            raise InvalidFreeSpace()
        if pos is not None and not geometry.is_position_in_range(pos, self.grid_size):
            raise PositionOutOfRange(
                f"FREE position {pos} is outside a {self.grid_size}x{self.grid_size} grid"
            )

    @property
    def total_squares(self) -> int:
        return geometry.total_squares(self.grid_size)

    @property
    def capacity(self) -> int:
        return geometry.capacity(self.grid_size, self.has_free_space)

    def is_free_position(self, pos: int) -> bool:
        return self.has_free_space and pos == self.free_space_position

    def is_valid_item_position(self, pos: int) -> bool:
        return geometry.is_valid_item_position(pos, self)

    def with_free(self, position: Optional[int]) -> "CardConfiguration":
        return replace(self, has_free_space=position is not None, free_space_position=position)

    def to_dict(self) -> Dict[str, object]:
        return {
            "grid_size": self.grid_size,
            "header_text": self.header_text,
            "has_free_space": self.has_free_space,
            "free_space_position": self.free_space_position,
            "is_finalized": self.is_finalized,
        }


@dataclass(frozen=True)
class Item:
    position: int
    content: str
    is_completed: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.position, bool) or not isinstance(self.position, int) or self.position < 0:
            raise PositionOutOfRange(f"item position must be a non-negative integer, got {self.position!r}")
        content = (self.content or "").strip()
        if not content:
            raise InvalidItem()
        object.__setattr__(self, "content", content)

    def moved_to(self, position: int) -> "Item":
        return replace(self, position=position)

    def to_dict(self) -> Dict[str, object]:
        return {"position": self.position, "content": self.content, "is_completed": self.is_completed}


@dataclass(frozen=True)
class BingoLine:
    """A completed line; diag index 0 is the main diagonal, 1 the anti-diagonal."""

    kind: str
    index: int

    def to_dict(self) -> Dict[str, object]:
        return {"type": self.kind, "index": self.index}


@dataclass(frozen=True)
class Displacement:
    content: str
    from_position: int
    to_position: int


@dataclass(frozen=True)
class PlacementResult:
    config: CardConfiguration
    items: Tuple[Item, ...]
    displaced: Optional[Displacement] = None


@dataclass(frozen=True)
class SwapResult:
    config: CardConfiguration
    items: Tuple[Item, ...]
    displaced: Optional[Displacement] = None


@dataclass(frozen=True)
class CloneResult:
    config: CardConfiguration
    items: Tuple[Item, ...]
    truncated: bool = False
    dropped: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CardStats:
    total_items: int
    completed_items: int
    capacity: int
    completion_rate: float
    bingos: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_items": self.total_items,
            "completed_items": self.completed_items,
            "capacity": self.capacity,
            "completion_rate": self.completion_rate,
            "bingos": self.bingos,
        }


def sort_items(items: Iterable[Item]) -> Tuple[Item, ...]:
    return tuple(sorted(items, key=lambda it: it.position))


def items_by_position(items: Iterable[Item]) -> Dict[int, Item]:
    return {it.position: it for it in items}


def empty_positions(config: CardConfiguration, items: Iterable[Item]) -> List[int]:
    """Valid item positions that currently hold nothing, ascending."""
    taken = {it.position for it in items}
    return [
        pos
        for pos in range(config.total_squares)
        if pos not in taken and not config.is_free_position(pos)
    ]
