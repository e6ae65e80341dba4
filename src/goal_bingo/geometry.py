"""Grid geometry: sizes, positions, capacity and header defaults.

Positions are row-major indices into an ``n x n`` grid, ``row * n + col``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from .errors import InvalidGridSize, InvalidHeaderLength

if TYPE_CHECKING:  # pragma: no cover
    from .models import CardConfiguration

MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 5
VALID_GRID_SIZES = tuple(range(MIN_GRID_SIZE, MAX_GRID_SIZE + 1))
BASE_HEADER = "BINGO"


def is_valid_grid_size(n: int) -> bool:
    return isinstance(n, int) and not isinstance(n, bool) and n in VALID_GRID_SIZES


def require_grid_size(n: int) -> int:
    if not is_valid_grid_size(n):
        raise InvalidGridSize(f"grid size must be one of {list(VALID_GRID_SIZES)}, got {n!r}")
    return n


def total_squares(n: int) -> int:
    return require_grid_size(n) ** 2


def capacity(n: int, has_free_space: bool) -> int:
    return total_squares(n) - (1 if has_free_space else 0)


def default_header_text(n: int) -> str:
    """First ``n`` letters of BINGO: BI, BIN, BING, BINGO."""
    return BASE_HEADER[: require_grid_size(n)]


def normalize_header_text(text: str) -> str:
    return text.strip().upper()


def validate_header_text(text: str, n: int) -> str:
    """Return the normalized header or raise InvalidHeaderLength."""
    require_grid_size(n)
    normalized = normalize_header_text(text or "")
    if not 1 <= len(normalized) <= n:
        raise InvalidHeaderLength(f"header must be between 1 and {n} characters, got {len(normalized)}")
    return normalized


def center_position(n: int) -> Optional[int]:
    """Center cell for odd grids (3 -> 4, 5 -> 12); None for even grids."""
    require_grid_size(n)
    if n % 2 == 0:
        return None
    return (n * n) // 2


def is_position_in_range(pos: int, n: int) -> bool:
    return 0 <= pos < total_squares(n)


def is_valid_item_position(pos: int, config: "CardConfiguration") -> bool:
    if not is_position_in_range(pos, config.grid_size):
        return False
    return not (config.has_free_space and pos == config.free_space_position)


def build_lines(n: int) -> List[Tuple[str, int, Tuple[int, ...]]]:
    """All ``2n + 2`` winning lines as (kind, index, positions).

    Rows first, then columns, then the main and anti diagonals.
    """
    require_grid_size(n)
    lines: List[Tuple[str, int, Tuple[int, ...]]] = []
    for row in range(n):
        lines.append(("row", row, tuple(row * n + col for col in range(n))))
    for col in range(n):
        lines.append(("col", col, tuple(row * n + col for row in range(n))))
    lines.append(("diag", 0, tuple(i * n + i for i in range(n))))
    lines.append(("diag", 1, tuple(i * n + (n - 1 - i) for i in range(n))))
    return lines
