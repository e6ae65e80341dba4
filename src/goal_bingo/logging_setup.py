from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    *,
    level: str = "INFO",
    log_file: Optional[str] = None,
    colors: str = "auto",
) -> None:
    """Route goal_bingo logs to stderr through rich, and optionally to a rotating file."""
    lvl = getattr(logging, level.upper(), logging.INFO)
    force_terminal = {"always": True, "never": False}.get(colors)
    console = Console(stderr=True, force_terminal=force_terminal, no_color=colors == "never")
    handlers: List[logging.Handler] = [
        RichHandler(console=console, rich_tracebacks=True, show_time=True, show_level=True, markup=False)
    ]
    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
        file_handler.setLevel(lvl)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        handlers.append(file_handler)
    logging.basicConfig(level=lvl, handlers=handlers, force=True)
