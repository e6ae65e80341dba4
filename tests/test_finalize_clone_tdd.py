from __future__ import annotations

from collections import Counter

import pytest

from goal_bingo.engine import (
    CardState,
    card_state,
    change_grid_size,
    clone_card,
    create_configuration,
    disable_free,
    enable_free,
    finalize,
    move_free,
    set_completed,
    update_header,
)
from goal_bingo.errors import AlreadyFinalized, CapacityNotMet, InvalidGridSize
from goal_bingo.models import Item


def test_finalize_requires_full_board(fill):
    cfg = create_configuration(3)
    with pytest.raises(CapacityNotMet):
        finalize(cfg, fill(cfg, 7))
    done = finalize(cfg, fill(cfg))
    assert done.is_finalized
    assert card_state(done) is CardState.FINALIZED
    assert card_state(cfg) is CardState.DRAFT


def test_finalized_configuration_is_frozen(rng, fill):
    cfg = create_configuration(3)
    items = fill(cfg)
    done = finalize(cfg, items)
    for attempt in (
        lambda: enable_free(done, items, rng),
        lambda: disable_free(done),
        lambda: move_free(done, items, 0, rng),
        lambda: update_header(done, "ABC"),
        lambda: change_grid_size(done, (), 4, rng=rng),
        lambda: finalize(done, items),
    ):
        with pytest.raises(AlreadyFinalized):
            attempt()


def test_completion_still_changes_after_finalize(fill):
    cfg = create_configuration(3)
    items = fill(cfg)
    done = finalize(cfg, items)
    updated = set_completed(done, items, 0, True)
    assert [it.position for it in updated if it.is_completed] == [0]


def test_clone_5x5_into_3x3_truncates(rng, fill):
    source_cfg = create_configuration(5)
    source_items = fill(source_cfg, completed={0, 1, 2})
    source_cfg = finalize(source_cfg, source_items)

    result = clone_card(source_cfg, source_items, 3, True, rng)

    assert result.truncated is True
    assert len(result.items) == 8
    assert len(result.dropped) == 16
    assert result.config.grid_size == 3
    assert result.config.free_space_position == 4
    assert not result.config.is_finalized
    assert result.config.header_text == "BIN"
    assert not any(it.is_completed for it in result.items)
    assert not any(result.config.is_free_position(it.position) for it in result.items)
    assert len({it.position for it in result.items}) == 8


def test_clone_into_larger_grid_keeps_everything(rng, fill):
    source_cfg = create_configuration(3, header_text="GO")
    source_items = fill(source_cfg)
    result = clone_card(source_cfg, source_items, 5, False, rng)
    assert result.truncated is False
    assert result.dropped == ()
    assert result.config.header_text == "GO"
    assert result.config.has_free_space is False
    assert Counter(it.content for it in result.items) == Counter(it.content for it in source_items)


def test_clone_even_target_with_free(rng, fill):
    source_cfg = create_configuration(3)
    result = clone_card(source_cfg, fill(source_cfg), 2, True, rng)
    assert result.config.has_free_space
    assert len(result.items) == 3
    assert result.truncated


def test_clone_rejects_bad_grid(rng):
    with pytest.raises(InvalidGridSize):
        clone_card(create_configuration(3), (Item(0, "a"),), 6, True, rng)
