from __future__ import annotations

import hashlib
import json
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .models import CardConfiguration, Item, items_by_position
from .validation import check_items

FREE_MARK = "FREE"


def canonical_json_dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=True, sort_keys=True, separators=(",", ":"))


def layout_matrix(config: CardConfiguration, items: Sequence[Item]) -> List[List[Optional[str]]]:
    """Row-major contents; FREE cell as ``"FREE"``, empty cells as None."""
    n = config.grid_size
    by_pos = items_by_position(items)
    rows: List[List[Optional[str]]] = []
    for r in range(n):
        row: List[Optional[str]] = []
        for c in range(n):
            pos = r * n + c
            if config.is_free_position(pos):
                row.append(FREE_MARK)
            elif pos in by_pos:
                row.append(by_pos[pos].content)
            else:
                row.append(None)
        rows.append(row)
    return rows


def layout_hash(config: CardConfiguration, items: Sequence[Item]) -> str:
    """Fingerprint of shape, header, FREE cell and contents; completion is ignored."""
    payload = {
        "grid_size": config.grid_size,
        "header_text": config.header_text,
        "free_space_position": config.free_space_position,
        "matrix": layout_matrix(config, items),
    }
    return "sha256:" + hashlib.sha256(canonical_json_dumps(payload).encode("utf-8")).hexdigest()


def card_to_dict(config: CardConfiguration, items: Sequence[Item]) -> Dict[str, object]:
    return {
        "config": config.to_dict(),
        "items": [it.to_dict() for it in sorted(items, key=lambda it: it.position)],
        "layout_hash": layout_hash(config, items),
    }


def card_from_dict(
    data: Mapping[str, Any], *, validate: bool = True
) -> Tuple[CardConfiguration, Tuple[Item, ...]]:
    """Rebuild a card document produced by :func:`card_to_dict`.

    With ``validate=False`` the item set is returned as found so it can be audited.
    """
    if not isinstance(data, Mapping) or "config" not in data:
        raise ValueError("card document must be a mapping with a 'config' key")
    raw_cfg = data["config"]
    if not isinstance(raw_cfg, Mapping):
        raise ValueError("card document 'config' must be a mapping")
    config = CardConfiguration(
        grid_size=int(raw_cfg["grid_size"]),
        header_text=str(raw_cfg["header_text"]),
        has_free_space=bool(raw_cfg.get("has_free_space", False)),
        free_space_position=raw_cfg.get("free_space_position"),
        is_finalized=bool(raw_cfg.get("is_finalized", False)),
    )
    items = [
        Item(
            position=int(raw["position"]),
            content=str(raw["content"]),
            is_completed=bool(raw.get("is_completed", False)),
        )
        for raw in data.get("items", [])
    ]
    if not validate:
        return config, tuple(items)
    return config, check_items(config, items)


def ensure_parent(path: Path, *, mkdirs: bool) -> None:
    parent = path.parent
    if not parent.exists() and mkdirs:
        parent.mkdir(parents=True, exist_ok=True)


def write_json(path: Path, data: object, *, mkdirs: bool, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(f"Refusing to overwrite existing file without --force: {path}")
    ensure_parent(path, mkdirs=mkdirs)
    text = json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2)
    path.write_text(text + "\n", encoding="utf-8")


def read_card_json(path: Path) -> Tuple[CardConfiguration, Tuple[Item, ...]]:
    if not path.exists():
        raise FileNotFoundError(f"Card file not found: {path}")
    return card_from_dict(json.loads(path.read_text(encoding="utf-8")))


def build_run_meta(*, app_version: str, command: str, seed: Optional[int], rng_engine: str) -> Dict[str, object]:
    return {
        "app_version": app_version,
        "command": command,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "python_version": sys.version.split()[0],
        "platform": platform.system().lower(),
        "seed": seed,
        "rng_engine": rng_engine,
        "hash_algorithm": "sha256",
    }


def emit_card_json(
    path: Path,
    *,
    config: CardConfiguration,
    items: Sequence[Item],
    run_meta: Optional[Dict[str, object]] = None,
    mkdirs: bool = True,
    overwrite: bool,
) -> None:
    data = card_to_dict(config, items)
    if run_meta is not None:
        data["run_meta"] = run_meta
    write_json(path, data, mkdirs=mkdirs, overwrite=overwrite)
