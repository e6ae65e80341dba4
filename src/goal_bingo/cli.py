from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, NoReturn, Optional, Sequence, Tuple

import typer
from rich.console import Console

from . import engine
from .config import resolve_settings
from .errors import CardError
from .logging_setup import setup_logging
from .models import CardConfiguration, Item
from .render import render_table, render_text
from .rng import ENGINES, RandomSource, create_rng, derive_seed
from .serialize import build_run_meta, card_from_dict, emit_card_json, layout_hash, read_card_json
from .verify import verify_card
from .version import __version__

logger = logging.getLogger(__name__)

app = typer.Typer(help="Goal bingo card editor")
free_app = typer.Typer(help="Enable, disable or move the FREE space")
app.add_typer(free_app, name="free")

CARD_ERROR_EXIT = 2


@dataclass
class CliState:
    settings: Dict[str, Any] = field(default_factory=dict)

    @property
    def seed(self) -> Optional[int]:
        value = self.settings.get("seed", {}).get("value")
        return None if value is None else int(value)

    @property
    def rng_engine(self) -> str:
        return str(self.settings.get("seed", {}).get("engine", "py_random"))


def _state(ctx: typer.Context) -> CliState:
    if not isinstance(ctx.obj, CliState):
        ctx.obj = CliState(settings=resolve_settings(config_path_str=None, cli_overrides={})[0])
    return ctx.obj


def _rng(state: CliState, purpose: str, salt: str) -> RandomSource:
    """Seeded runs derive one sub-seed per (layout, command) so repeated commands stay reproducible."""
    seed = state.seed
    if seed is not None:
        seed = derive_seed(seed, salt, purpose)
    return create_rng(state.rng_engine, seed)


def _fail(err: Exception, code: int = CARD_ERROR_EXIT) -> NoReturn:
    label = getattr(err, "code", type(err).__name__)
    typer.echo(f"error[{label}]: {err}", err=True)
    raise typer.Exit(code=code)


def _load(path: Path) -> Tuple[CardConfiguration, Tuple[Item, ...]]:
    try:
        return read_card_json(path)
    except CardError as err:
        _fail(err)
    except (FileNotFoundError, ValueError, KeyError) as err:
        _fail(err, code=1)


def _save(
    state: CliState,
    path: Path,
    config: CardConfiguration,
    items: Sequence[Item],
    *,
    command: str,
    overwrite: bool = True,
) -> None:
    meta = build_run_meta(
        app_version=__version__, command=command, seed=state.seed, rng_engine=state.rng_engine
    )
    try:
        emit_card_json(path, config=config, items=items, run_meta=meta, overwrite=overwrite)
    except FileExistsError as err:
        _fail(err, code=1)
    logger.debug("Wrote %s (%s)", path, command)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(0)


@app.callback()
def common_options(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show application version and exit",
        is_eager=True,
        callback=_show_version,
    ),
    config: str = typer.Option(None, "--config", help="Path to settings file (YAML/JSON)"),
    seed: int = typer.Option(None, "--seed", help="Seed for reproducible placement"),
    rng_engine: str = typer.Option(None, "--rng-engine", help="py_random|numpy_pcg64"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG|INFO|WARN|ERROR"),
    log_file: str = typer.Option(None, "--log-file", help="Log file path"),
    colors: str = typer.Option(None, "--colors", help="auto|always|never"),
) -> None:
    cli_overrides: Dict[str, Any] = {}
    if seed is not None:
        cli_overrides["seed.value"] = seed
    if rng_engine:
        cli_overrides["seed.engine"] = rng_engine
    if log_level:
        cli_overrides["log_level"] = log_level
    if log_file:
        cli_overrides["log_file"] = log_file
    if colors:
        cli_overrides["colors"] = colors

    try:
        settings, _cfg_path = resolve_settings(config_path_str=config, cli_overrides=cli_overrides)
    except (FileNotFoundError, ValueError) as err:
        _fail(err, code=1)
    engine_name = str(settings.get("seed", {}).get("engine", "py_random")).strip().lower()
    if engine_name not in ENGINES:
        _fail(ValueError(f"Unsupported RNG engine: {engine_name}"), code=1)
    setup_logging(
        level=str(settings.get("log_level", "INFO")),
        log_file=settings.get("log_file"),
        colors=str(settings.get("colors", "auto")),
    )
    ctx.obj = CliState(settings=settings)


@app.command()
def new(
    ctx: typer.Context,
    card: Path = typer.Argument(..., help="Card file to create"),
    size: int = typer.Option(None, "--size", "-n", help="Grid size (2-5)"),
    header: str = typer.Option(None, "--header", help="Header text, at most one letter per column"),
    free: Optional[bool] = typer.Option(None, "--free/--no-free", help="Start with a FREE space"),
    force: bool = typer.Option(False, "--force", help="Overwrite the card file if it exists"),
) -> None:
    """Create an empty draft card."""
    state = _state(ctx)
    grid_size = size if size is not None else int(state.settings.get("grid_size", 5))
    has_free = free if free is not None else bool(state.settings.get("has_free_space", True))
    header_text = header if header is not None else state.settings.get("header_text")
    try:
        config = engine.create_configuration(
            grid_size, header_text, has_free, rng=_rng(state, "new", str(card))
        )
    except CardError as err:
        _fail(err)
    _save(state, card, config, (), command="new", overwrite=force)
    typer.echo(f"Created {grid_size}x{grid_size} card at {card}")


@app.command()
def add(
    ctx: typer.Context,
    card: Path = typer.Argument(...),
    content: str = typer.Argument(..., help="Goal text"),
    position: int = typer.Option(None, "--position", "-p", help="Cell index; random empty cell if omitted"),
) -> None:
    """Add a goal to the card."""
    state = _state(ctx)
    config, items = _load(card)
    try:
        items = engine.add_item(
            config, items, content, position, rng=_rng(state, "add", layout_hash(config, items))
        )
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="add")
    typer.echo(f"{len(items)}/{config.capacity} squares filled")


@app.command()
def remove(ctx: typer.Context, card: Path = typer.Argument(...), position: int = typer.Argument(...)) -> None:
    """Remove the goal at a position."""
    state = _state(ctx)
    config, items = _load(card)
    try:
        items = engine.remove_item(config, items, position)
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="remove")


@app.command()
def edit(
    ctx: typer.Context,
    card: Path = typer.Argument(...),
    position: int = typer.Argument(...),
    content: str = typer.Option(None, "--content", help="New goal text"),
    to: int = typer.Option(None, "--to", help="Move the goal to this empty cell"),
) -> None:
    """Change a goal's text or move it to an empty cell."""
    state = _state(ctx)
    config, items = _load(card)
    try:
        items = engine.update_item(config, items, position, content=content, new_position=to)
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="edit")


@app.command()
def complete(
    ctx: typer.Context,
    card: Path = typer.Argument(...),
    position: int = typer.Argument(...),
    undo: bool = typer.Option(False, "--undo", help="Mark the goal as not completed"),
) -> None:
    """Mark a goal as completed (works on finalized cards)."""
    state = _state(ctx)
    config, items = _load(card)
    before = engine.count_bingos(config, items)
    try:
        items = engine.set_completed(config, items, position, not undo)
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="complete")
    after = engine.count_bingos(config, items)
    if after > before:
        typer.echo(f"BINGO! {after} line(s) complete")


@app.command()
def header(ctx: typer.Context, card: Path = typer.Argument(...), text: str = typer.Argument(...)) -> None:
    """Change the header text."""
    state = _state(ctx)
    config, items = _load(card)
    try:
        config = engine.update_header(config, text)
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="header")


@app.command()
def resize(ctx: typer.Context, card: Path = typer.Argument(...), size: int = typer.Argument(...)) -> None:
    """Change the grid size of an empty draft card."""
    state = _state(ctx)
    config, items = _load(card)
    try:
        config = engine.change_grid_size(config, items, size, rng=_rng(state, "resize", str(card)))
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="resize")


def _report_displacement(displaced) -> None:
    if displaced is not None:
        typer.echo(
            f"Moved {displaced.content!r} from {displaced.from_position} to {displaced.to_position}"
        )


@free_app.command("enable")
def free_enable(ctx: typer.Context, card: Path = typer.Argument(...)) -> None:
    state = _state(ctx)
    config, items = _load(card)
    try:
        result = engine.enable_free(config, items, _rng(state, "free-enable", layout_hash(config, items)))
    except CardError as err:
        _fail(err)
    _save(state, card, result.config, result.items, command="free enable")
    _report_displacement(result.displaced)
    typer.echo(f"FREE space at {result.config.free_space_position}")


@free_app.command("disable")
def free_disable(ctx: typer.Context, card: Path = typer.Argument(...)) -> None:
    state = _state(ctx)
    config, items = _load(card)
    try:
        config = engine.disable_free(config)
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="free disable")


@free_app.command("move")
def free_move(ctx: typer.Context, card: Path = typer.Argument(...), position: int = typer.Argument(...)) -> None:
    state = _state(ctx)
    config, items = _load(card)
    try:
        result = engine.move_free(
            config, items, position, _rng(state, "free-move", layout_hash(config, items))
        )
    except CardError as err:
        _fail(err)
    _save(state, card, result.config, result.items, command="free move")
    _report_displacement(result.displaced)


@app.command()
def shuffle(ctx: typer.Context, card: Path = typer.Argument(...)) -> None:
    """Shuffle goals over the cells they occupy."""
    state = _state(ctx)
    config, items = _load(card)
    try:
        items = engine.shuffle_items(config, items, _rng(state, "shuffle", layout_hash(config, items)))
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="shuffle")


@app.command()
def swap(
    ctx: typer.Context,
    card: Path = typer.Argument(...),
    pos_a: int = typer.Argument(...),
    pos_b: int = typer.Argument(...),
) -> None:
    """Swap two cells; swapping with FREE moves the FREE space."""
    state = _state(ctx)
    config, items = _load(card)
    try:
        result = engine.swap_positions(
            config, items, pos_a, pos_b, _rng(state, "swap", layout_hash(config, items))
        )
    except CardError as err:
        _fail(err)
    _save(state, card, result.config, result.items, command="swap")
    _report_displacement(result.displaced)


@app.command()
def finalize(ctx: typer.Context, card: Path = typer.Argument(...)) -> None:
    """Lock the card layout. This cannot be undone."""
    state = _state(ctx)
    config, items = _load(card)
    try:
        config = engine.finalize(config, items)
    except CardError as err:
        _fail(err)
    _save(state, card, config, items, command="finalize")
    typer.echo("Card finalized")


@app.command()
def clone(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="Card to copy goals from"),
    dest: Path = typer.Argument(..., help="New card file"),
    size: int = typer.Option(None, "--size", "-n", help="Target grid size; defaults to the source size"),
    free: Optional[bool] = typer.Option(None, "--free/--no-free", help="FREE space on the new card"),
    force: bool = typer.Option(False, "--force", help="Overwrite the destination if it exists"),
) -> None:
    """Copy goal texts into a new draft card."""
    state = _state(ctx)
    config, items = _load(source)
    target_size = size if size is not None else config.grid_size
    target_free = free if free is not None else config.has_free_space
    try:
        result = engine.clone_card(
            config, items, target_size, target_free, _rng(state, "clone", layout_hash(config, items))
        )
    except CardError as err:
        _fail(err)
    _save(state, dest, result.config, result.items, command="clone", overwrite=force)
    typer.echo(f"Copied {len(result.items)} goals to {dest}")
    if result.truncated:
        typer.echo(f"{len(result.dropped)} goal(s) did not fit and were left out", err=True)


@app.command()
def bingos(card: Path = typer.Argument(...)) -> None:
    """List completed lines."""
    config, items = _load(card)
    lines = engine.detect_bingos(config, items)
    typer.echo(json.dumps([line.to_dict() for line in lines]))


@app.command()
def stats(
    card: Path = typer.Argument(...),
    suggest: int = typer.Option(3, "--suggest", help="How many goals to suggest next"),
) -> None:
    """Show progress and the goals closest to a bingo."""
    config, items = _load(card)
    data: Dict[str, Any] = engine.card_stats(config, items).to_dict()
    data["state"] = engine.card_state(config).value
    data["suggestions"] = [it.to_dict() for it in engine.recommend_items(config, items, suggest)]
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


@app.command()
def show(
    ctx: typer.Context,
    card: Path = typer.Argument(...),
    plain: bool = typer.Option(False, "--plain", help="Plain text instead of a table"),
) -> None:
    """Print the card grid."""
    config, items = _load(card)
    if plain:
        typer.echo(render_text(config, items))
        return
    colors = str(_state(ctx).settings.get("colors", "auto"))
    Console(no_color=colors == "never").print(render_table(config, items))


@app.command()
def verify(card: Path = typer.Argument(..., help="Card file to audit")) -> None:
    """Audit a card file without trusting its contents."""
    try:
        data = json.loads(card.read_text(encoding="utf-8"))
        config, items = card_from_dict(data, validate=False)
    except CardError as err:
        _fail(err)
    except (OSError, ValueError, KeyError) as err:
        _fail(err, code=1)
    report = verify_card(config, items)
    stored = data.get("layout_hash")
    if stored is not None and "layout_hash" in report:
        report["layout_hash_matches"] = stored == report["layout_hash"]
    typer.echo(json.dumps(report, indent=2, sort_keys=True))
    ok = bool(report["ok"]) and report.get("layout_hash_matches", True)
    raise typer.Exit(code=0 if ok else 1)


def main(_argv: list[str] | None = None) -> int:
    try:
        app(args=_argv, standalone_mode=True)
        return 0
    except SystemExit as e:
        return int(e.code) if e.code is not None else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
