"""Error kinds raised by the card engine.

Every engine operation either returns a new snapshot or raises one of these.
Inputs are never mutated, so a raised error leaves the caller's state intact.
"""

from __future__ import annotations


class CardError(ValueError):
    code = "CARD_ERROR"
    default_message = "card operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def __str__(self) -> str:
        return self.message


class InvalidGridSize(CardError):
    code = "INVALID_GRID_SIZE"
    default_message = "grid size must be 2, 3, 4 or 5"


class InvalidHeaderLength(CardError):
    code = "INVALID_HEADER_LENGTH"
    default_message = "header text length must be between 1 and the grid size"


class PositionOutOfRange(CardError):
    code = "POSITION_OUT_OF_RANGE"
    default_message = "position is outside the grid"


class PositionOccupied(CardError):
    code = "POSITION_OCCUPIED"
    default_message = "position already holds an item"


class CardFull(CardError):
    code = "CARD_FULL"
    default_message = "the card is full; remove an item first"


class AlreadyEnabled(CardError):
    code = "ALREADY_ENABLED"
    default_message = "FREE space is already enabled"


class NotEnabled(CardError):
    code = "NOT_ENABLED"
    default_message = "FREE space is not enabled"


class InvalidFreeSpace(CardError):
    code = "INVALID_FREE_SPACE"
    default_message = "has_free_space must be true exactly when free_space_position is set"


class CapacityNotMet(CardError):
    code = "CAPACITY_NOT_MET"
    default_message = "fill every square before finalizing the card"


class AlreadyFinalized(CardError):
    code = "ALREADY_FINALIZED"
    default_message = "card is finalized and its layout can no longer change"


class InvalidItem(CardError):
    code = "INVALID_ITEM"
    default_message = "item content must not be empty"


class ItemNotFound(CardError):
    code = "ITEM_NOT_FOUND"
    default_message = "no item at that position"


ALL_ERRORS = (
    InvalidGridSize,
    InvalidHeaderLength,
    PositionOutOfRange,
    PositionOccupied,
    CardFull,
    AlreadyEnabled,
    NotEnabled,
    InvalidFreeSpace,
    CapacityNotMet,
    AlreadyFinalized,
    InvalidItem,
    ItemNotFound,
)
