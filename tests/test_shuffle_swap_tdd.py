from __future__ import annotations

from collections import Counter

import pytest
from hypothesis import given, strategies as st

from goal_bingo.engine import create_configuration, finalize, shuffle_items, swap_positions
from goal_bingo.errors import AlreadyFinalized, CardFull, PositionOutOfRange
from goal_bingo.models import CardConfiguration, Item
from goal_bingo.rng import create_rng


@given(
    n=st.sampled_from([3, 5]),
    seed=st.integers(min_value=0, max_value=2**32),
    occupied=st.sets(st.integers(min_value=0, max_value=24), max_size=24),
)
def test_shuffle_keeps_contents_free_and_empty_cells(n, seed, occupied):
    cfg = create_configuration(n)
    positions = sorted(p for p in occupied if p < n * n and not cfg.is_free_position(p))
    items = tuple(Item(p, f"goal-{p}", is_completed=p % 2 == 0) for p in positions)

    shuffled = shuffle_items(cfg, items, create_rng("py_random", seed))

    assert Counter(it.content for it in shuffled) == Counter(it.content for it in items)
    assert {it.position for it in shuffled} == set(positions)
    assert not any(cfg.is_free_position(it.position) for it in shuffled)
    # completion travels with its item
    assert {(it.content, it.is_completed) for it in shuffled} == {(it.content, it.is_completed) for it in items}


def test_shuffle_is_deterministic_for_a_seed(fill):
    cfg = create_configuration(5)
    items = fill(cfg, 15)
    a = shuffle_items(cfg, items, create_rng("py_random", 42))
    b = shuffle_items(cfg, items, create_rng("py_random", 42))
    assert a == b


def test_shuffle_rejected_after_finalize(rng, fill):
    cfg = create_configuration(3)
    items = fill(cfg)
    with pytest.raises(AlreadyFinalized):
        shuffle_items(finalize(cfg, items), items, rng)


def test_swap_item_with_item_and_empty(rng):
    cfg = create_configuration(3)
    items = (Item(0, "a"), Item(1, "b"))
    swapped = swap_positions(cfg, items, 0, 1, rng)
    assert {it.position: it.content for it in swapped.items} == {0: "b", 1: "a"}
    moved = swap_positions(cfg, items, 0, 8, rng)
    assert {it.position: it.content for it in moved.items} == {1: "b", 8: "a"}
    assert moved.config == cfg


def test_swap_empty_with_empty_is_noop(rng):
    cfg = create_configuration(3)
    result = swap_positions(cfg, (Item(0, "a"),), 2, 3, rng)
    assert result.items == (Item(0, "a"),)
    assert result.config == cfg


def test_swap_free_with_empty_moves_free(rng):
    cfg = create_configuration(3)
    result = swap_positions(cfg, (Item(0, "a"),), 4, 8, rng)
    assert result.config.free_space_position == 8
    assert result.displaced is None
    reverse = swap_positions(cfg, (Item(0, "a"),), 8, 4, rng)
    assert reverse.config.free_space_position == 8


def test_swap_free_with_item_displaces(first_pick):
    cfg = create_configuration(3)
    result = swap_positions(cfg, (Item(0, "a"),), 4, 0, first_pick)
    assert result.config.free_space_position == 0
    assert result.displaced is not None
    assert result.items == (Item(1, "a"),)


def test_swap_free_with_item_on_full_card_fails(rng, fill):
    cfg = create_configuration(3)
    items = fill(cfg)
    with pytest.raises(CardFull):
        swap_positions(cfg, items, 4, 0, rng)


def test_swap_same_free_cell_is_noop(rng):
    cfg = create_configuration(5)
    assert swap_positions(cfg, (), 12, 12, rng).config == cfg


def test_swap_rejects_out_of_range(rng):
    cfg = CardConfiguration(grid_size=2, header_text="BI")
    with pytest.raises(PositionOutOfRange):
        swap_positions(cfg, (), 0, 4, rng)
    with pytest.raises(PositionOutOfRange):
        swap_positions(cfg, (), -1, 0, rng)
