from __future__ import annotations

import pytest

from goal_bingo.errors import InvalidFreeSpace, InvalidHeaderLength, InvalidItem, PositionOutOfRange
from goal_bingo.models import CardConfiguration, Item, empty_positions


def test_free_flag_and_position_must_agree():
    with pytest.raises(InvalidFreeSpace):
        CardConfiguration(grid_size=3, header_text="BIN", has_free_space=True, free_space_position=None)
    with pytest.raises(InvalidFreeSpace):
        CardConfiguration(grid_size=3, header_text="BIN", has_free_space=False, free_space_position=4)


@pytest.mark.parametrize("pos", [4.5, 4.0, True, "4"])
def test_free_position_must_be_an_integer(pos):
    with pytest.raises(PositionOutOfRange):
        CardConfiguration(grid_size=3, header_text="BIN", has_free_space=True, free_space_position=pos)


def test_loaded_document_with_fractional_free_position_is_rejected():
    from goal_bingo.serialize import card_from_dict

    doc = {"config": {"grid_size": 3, "header_text": "BIN", "has_free_space": True, "free_space_position": 4.5}}
    with pytest.raises(PositionOutOfRange):
        card_from_dict(doc)


def test_free_position_must_be_on_the_grid():
    with pytest.raises(PositionOutOfRange):
        CardConfiguration(grid_size=2, header_text="BI", has_free_space=True, free_space_position=4)


def test_header_is_normalized_and_bounded():
    cfg = CardConfiguration(grid_size=4, header_text="  go ")
    assert cfg.header_text == "GO"
    with pytest.raises(InvalidHeaderLength):
        CardConfiguration(grid_size=2, header_text="BIN")


def test_capacity_tracks_free_flag():
    on = CardConfiguration(grid_size=5, header_text="BINGO", has_free_space=True, free_space_position=12)
    off = on.with_free(None)
    assert on.capacity == 24
    assert off.capacity == 25
    assert off.free_space_position is None
    assert on.free_space_position == 12


def test_item_content_trimmed_and_required():
    assert Item(position=0, content="  run a 10k ").content == "run a 10k"
    with pytest.raises(InvalidItem):
        Item(position=0, content="   ")
    with pytest.raises(PositionOutOfRange):
        Item(position=-1, content="x")


def test_empty_positions_skip_free_and_occupied():
    cfg = CardConfiguration(grid_size=3, header_text="BIN", has_free_space=True, free_space_position=4)
    items = [Item(0, "a"), Item(8, "b")]
    assert empty_positions(cfg, items) == [1, 2, 3, 5, 6, 7]


def test_error_codes_are_distinct_and_catchable_as_value_error():
    from goal_bingo.errors import ALL_ERRORS, CardError, CardFull

    codes = [err.code for err in ALL_ERRORS]
    assert len(set(codes)) == len(codes)
    assert all(issubclass(err, CardError) and issubclass(err, ValueError) for err in ALL_ERRORS)
    assert str(CardFull()) == "the card is full; remove an item first"
