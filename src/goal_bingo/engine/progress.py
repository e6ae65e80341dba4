from __future__ import annotations

from collections import Counter
from typing import List, Sequence

from .. import geometry
from ..models import CardConfiguration, CardStats, Item, items_by_position
from .bingo import count_bingos


def card_stats(config: CardConfiguration, items: Sequence[Item]) -> CardStats:
    completed = sum(1 for it in items if it.is_completed)
    cap = config.capacity
    return CardStats(
        total_items=len(items),
        completed_items=completed,
        capacity=cap,
        completion_rate=round(completed / cap, 4) if cap else 0.0,
        bingos=count_bingos(config, items),
    )


def recommend_items(config: CardConfiguration, items: Sequence[Item], limit: int = 3) -> List[Item]:
    """Uncompleted items that would bring the closest lines nearer to a bingo.

    Lines missing the fewest cells are considered; each of their missing items
    scores one point per such line. Ties break on position. When no line has
    an item left to complete, uncompleted items are returned by position.
    """
    if limit <= 0:
        return []
    by_pos = items_by_position(items)
    missing_per_line: List[List[int]] = []
    for _kind, _index, positions in geometry.build_lines(config.grid_size):
        missing = [
            pos
            for pos in positions
            if not config.is_free_position(pos) and not (pos in by_pos and by_pos[pos].is_completed)
        ]
        if missing:
            missing_per_line.append(missing)

    scores: Counter[int] = Counter()
    if missing_per_line:
        fewest = min(len(m) for m in missing_per_line)
        for missing in missing_per_line:
            if len(missing) == fewest:
                scores.update(pos for pos in missing if pos in by_pos)

    if not scores:
        pending = sorted((it for it in items if not it.is_completed), key=lambda it: it.position)
        return pending[:limit]

    ranked = sorted(scores.items(), key=lambda kv: (-kv[1], kv[0]))
    return [by_pos[pos] for pos, _score in ranked[:limit]]
