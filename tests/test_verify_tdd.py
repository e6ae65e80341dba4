from __future__ import annotations

from goal_bingo.engine import create_configuration
from goal_bingo.models import Item
from goal_bingo.verify import verify_card


def test_verify_reports_clean_full_card(fill):
    cfg = create_configuration(3)
    items = fill(cfg, completed={3, 5})
    rep = verify_card(cfg, items)
    assert rep["ok"] is True
    assert all(rep["checks"].values())
    assert rep["ready_to_finalize"] is True
    assert rep["bingos"] == [{"type": "row", "index": 1}]
    assert rep["layout_hash"].startswith("sha256:")


def test_verify_reports_every_violation_without_raising():
    cfg = create_configuration(3)
    items = [Item(4, "on free"), Item(0, "a"), Item(0, "dup"), Item(11, "off grid")]
    rep = verify_card(cfg, items)
    assert rep["ok"] is False
    assert rep["checks"]["free_cell_empty"] is False
    assert rep["checks"]["positions_unique"] is False
    assert rep["checks"]["positions_in_range"] is False
    assert rep["checks"]["within_capacity"] is True
    assert "bingos" not in rep
