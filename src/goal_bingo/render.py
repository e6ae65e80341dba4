"""Text and terminal rendering of a card."""

from __future__ import annotations

from typing import List, Sequence

from rich.markup import escape
from rich.table import Table

from .models import CardConfiguration, Item, items_by_position
from .serialize import FREE_MARK

EMPTY_MARK = "."
DONE_MARK = "[x] "


def _cell_text(config: CardConfiguration, by_pos: dict, pos: int) -> str:
    if config.is_free_position(pos):
        return FREE_MARK
    item = by_pos.get(pos)
    if item is None:
        return EMPTY_MARK
    return (DONE_MARK if item.is_completed else "") + item.content


def render_text(config: CardConfiguration, items: Sequence[Item], *, width: int = 12) -> str:
    n = config.grid_size
    by_pos = items_by_position(items)
    header = config.header_text.ljust(n)
    lines: List[str] = [" ".join(ch.center(width) for ch in header).rstrip()]
    for r in range(n):
        cells = []
        for c in range(n):
            text = _cell_text(config, by_pos, r * n + c)
            if len(text) > width:
                text = text[: width - 1] + "~"
            cells.append(text.ljust(width))
        lines.append(" ".join(cells).rstrip())
    return "\n".join(lines)


def render_table(config: CardConfiguration, items: Sequence[Item]) -> Table:
    n = config.grid_size
    by_pos = items_by_position(items)
    state = "finalized" if config.is_finalized else "draft"
    table = Table(title=f"{n}x{n} card ({state})", show_lines=True)
    for ch in config.header_text.ljust(n):
        table.add_column(ch, justify="center", overflow="fold")
    for r in range(n):
        row = []
        for c in range(n):
            pos = r * n + c
            text = escape(_cell_text(config, by_pos, pos))
            if config.is_free_position(pos):
                text = f"[bold]{text}[/bold]"
            elif pos in by_pos and by_pos[pos].is_completed:
                text = f"[green]{text}[/green]"
            row.append(text)
        table.add_row(*row)
    return table
