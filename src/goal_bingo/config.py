from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml

ENV_PREFIX = "GOAL_BINGO_"

DEFAULTS: Dict[str, Any] = {
    "grid_size": 5,
    "has_free_space": True,
    "header_text": None,
    "seed": {"engine": "py_random", "value": None},
    "colors": "auto",
    "log_level": "INFO",
    "log_file": None,
}


def _read_config_file(config_path: Path | None) -> Dict[str, Any]:
    if not config_path:
        return {}
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    suffix = config_path.suffix.lower()
    text = config_path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Top-level YAML config must be a mapping")
        return data
    if suffix == ".json":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Top-level JSON config must be a mapping")
        return data
    raise ValueError(f"Unsupported config extension: {suffix}")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _collect_env_vars(env: Mapping[str, str]) -> Dict[str, Any]:
    """Map GOAL_BINGO_* variables to (possibly dotted) settings keys."""
    mapping: Dict[str, str] = {
        f"{ENV_PREFIX}GRID_SIZE": "grid_size",
        f"{ENV_PREFIX}HAS_FREE_SPACE": "has_free_space",
        f"{ENV_PREFIX}HEADER_TEXT": "header_text",
        f"{ENV_PREFIX}SEED_VALUE": "seed.value",
        f"{ENV_PREFIX}SEED_ENGINE": "seed.engine",
        f"{ENV_PREFIX}COLORS": "colors",
        f"{ENV_PREFIX}LOG_LEVEL": "log_level",
        f"{ENV_PREFIX}LOG_FILE": "log_file",
    }

    result: Dict[str, Any] = {}
    for env_key, cfg_key in mapping.items():
        if env_key not in env:
            continue
        raw = env[env_key]
        if cfg_key in {"grid_size", "seed.value"}:
            try:
                result[cfg_key] = int(raw)
            except ValueError:
                result[cfg_key] = raw
        elif cfg_key == "has_free_space":
            result[cfg_key] = _parse_bool(raw)
        else:
            result[cfg_key] = raw
    return result


def _set_nested(config: Dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = dotted_key.split(".")
    cursor = config
    for part in parts[:-1]:
        if part not in cursor or not isinstance(cursor[part], dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


def _apply_overrides(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = json.loads(json.dumps(base))  # deep copy via JSON
    for key, value in overrides.items():
        if "." in key:
            _set_nested(merged, key, value)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            for sub_key, sub_value in value.items():
                _set_nested(merged, f"{key}.{sub_key}", sub_value)
        else:
            merged[key] = value
    return merged


def resolve_log_file(
    resolved: Dict[str, Any],
    config_file: Path | None,
    cli_overrides: Mapping[str, Any],
) -> Dict[str, Any]:
    """Resolve a relative log_file against the config directory, or CWD when it came from the CLI."""
    value = resolved.get("log_file")
    if value is None or value == "":
        return resolved
    p = Path(str(value))
    if not p.is_absolute():
        from_cli = "log_file" in cli_overrides
        base = Path.cwd() if from_cli else (config_file.parent if config_file else Path.cwd())
        p = (base / p).resolve()
    result = dict(resolved)
    result["log_file"] = str(p)
    return result


def resolve_settings(
    *,
    config_path_str: str | None,
    cli_overrides: Mapping[str, Any],
    env: Mapping[str, str] | None = None,
) -> Tuple[Dict[str, Any], Path | None]:
    """Resolve settings with precedence CLI > ENV > config > defaults.

    Returns (resolved_settings, config_path).
    """
    config_path = Path(config_path_str).resolve() if config_path_str else None
    file_cfg = _read_config_file(config_path)
    env_map = _collect_env_vars(os.environ if env is None else env)

    merged = _apply_overrides(DEFAULTS, file_cfg)
    merged = _apply_overrides(merged, env_map)
    merged = _apply_overrides(merged, cli_overrides)

    merged = resolve_log_file(merged, config_path, cli_overrides)
    return merged, config_path
