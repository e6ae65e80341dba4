from __future__ import annotations

from collections import Counter
from typing import Dict, Sequence

from .engine.bingo import detect_bingos
from .models import CardConfiguration, Item
from .serialize import layout_hash


def check_positions_in_range(config: CardConfiguration, items: Sequence[Item]) -> bool:
    return all(0 <= it.position < config.total_squares for it in items)


def check_positions_unique(items: Sequence[Item]) -> bool:
    counts = Counter(it.position for it in items)
    return all(c == 1 for c in counts.values())


def check_free_cell_empty(config: CardConfiguration, items: Sequence[Item]) -> bool:
    return not any(config.is_free_position(it.position) for it in items)


def check_within_capacity(config: CardConfiguration, items: Sequence[Item]) -> bool:
    return len(items) <= config.capacity


def check_contents_present(items: Sequence[Item]) -> bool:
    return all(it.content.strip() for it in items)


def verify_card(config: CardConfiguration, items: Sequence[Item]) -> Dict[str, object]:
    """Audit a snapshot and report every check instead of raising."""
    checks = {
        "positions_in_range": check_positions_in_range(config, items),
        "positions_unique": check_positions_unique(items),
        "free_cell_empty": check_free_cell_empty(config, items),
        "within_capacity": check_within_capacity(config, items),
        "contents_present": check_contents_present(items),
    }
    ok = all(checks.values())
    report: Dict[str, object] = {
        "ok": ok,
        "checks": checks,
        "grid_size": config.grid_size,
        "capacity": config.capacity,
        "item_count": len(items),
        "is_finalized": config.is_finalized,
        "ready_to_finalize": ok and not config.is_finalized and len(items) == config.capacity,
    }
    if ok:
        report["bingos"] = [line.to_dict() for line in detect_bingos(config, items)]
        report["layout_hash"] = layout_hash(config, items)
    return report
