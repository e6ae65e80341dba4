from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from goal_bingo.cli import app
from goal_bingo.serialize import read_card_json

runner = CliRunner()


def invoke(*args: str):
    return runner.invoke(app, ["--log-level", "WARNING", "--seed", "7", *args])


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip()


def test_card_lifecycle(tmp_path: Path):
    card = tmp_path / "card.json"
    assert invoke("new", str(card), "--size", "3").exit_code == 0
    for i in range(8):
        result = invoke("add", str(card), f"goal {i}")
        assert result.exit_code == 0, result.output

    full = invoke("add", str(card), "one too many")
    assert full.exit_code == 2
    assert "CARD_FULL" in full.output

    assert invoke("shuffle", str(card)).exit_code == 0
    assert invoke("finalize", str(card)).exit_code == 0
    config, items = read_card_json(card)
    assert config.is_finalized
    assert len(items) == 8

    locked = invoke("free", "disable", str(card))
    assert locked.exit_code == 2
    assert "ALREADY_FINALIZED" in locked.output

    for pos in (3, 5):
        assert invoke("complete", str(card), str(pos)).exit_code == 0
    lines = json.loads(invoke("bingos", str(card)).stdout)
    assert lines == [{"type": "row", "index": 1}]

    stats = json.loads(invoke("stats", str(card)).stdout)
    assert stats["bingos"] == 1
    assert stats["state"] == "finalized"

    verified = invoke("verify", str(card))
    assert verified.exit_code == 0
    assert json.loads(verified.stdout)["layout_hash_matches"] is True

    plain = invoke("show", str(card), "--plain")
    assert "FREE" in plain.stdout


def test_clone_reports_truncation(tmp_path: Path):
    src = tmp_path / "src.json"
    dest = tmp_path / "dest.json"
    assert invoke("new", str(src), "--size", "4", "--no-free").exit_code == 0
    for i in range(16):
        assert invoke("add", str(src), f"goal {i}", "--position", str(i)).exit_code == 0
    result = invoke("clone", str(src), str(dest), "--size", "2", "--free")
    assert result.exit_code == 0, result.output
    config, items = read_card_json(dest)
    assert config.grid_size == 2
    assert config.has_free_space
    assert len(items) == 3
    assert invoke("clone", str(src), str(dest)).exit_code == 1


def test_free_move_and_swap(tmp_path: Path):
    card = tmp_path / "card.json"
    invoke("new", str(card), "--size", "5")
    invoke("add", str(card), "first", "--position", "0")
    assert invoke("free", "move", str(card), "0").exit_code == 0
    config, items = read_card_json(card)
    assert config.free_space_position == 0
    assert items[0].position != 0
    assert invoke("swap", str(card), "0", "24").exit_code == 0
    config, _items = read_card_json(card)
    assert config.free_space_position == 24


def test_verify_flags_tampered_file(tmp_path: Path):
    card = tmp_path / "card.json"
    invoke("new", str(card), "--size", "3")
    doc = json.loads(card.read_text(encoding="utf-8"))
    doc["items"] = [{"position": 4, "content": "on free"}]
    card.write_text(json.dumps(doc), encoding="utf-8")
    result = invoke("verify", str(card))
    assert result.exit_code == 1
    assert json.loads(result.stdout)["checks"]["free_cell_empty"] is False


def test_missing_card_file(tmp_path: Path):
    result = invoke("show", str(tmp_path / "nope.json"))
    assert result.exit_code == 1


def test_malformed_config_section_reports_error(tmp_path: Path):
    card = tmp_path / "card.json"
    card.write_text(json.dumps({"config": [], "items": []}), encoding="utf-8")
    result = invoke("show", str(card))
    assert result.exit_code == 1
    assert "error[ValueError]" in result.output
