from __future__ import annotations

import json
from pathlib import Path

from zzpadmin.core.settings import AppConfig, load_config, save_config


def test_missing_file_writes_defaults(tmp_path: Path) -> None:
    path = tmp_path / "cfg" / "config.json"
    config = load_config(path)
    assert config.labels == "nl"
    assert config.invoice_prefix == "F"
    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8"))["log_level"] == "INFO"


def test_corrupt_file_gives_defaults(tmp_path: Path, caplog) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) == AppConfig()
    # Left alone for the user to fix
    assert path.read_text(encoding="utf-8") == "{not json"
    assert "using defaults" in caplog.text


def test_unknown_keys_ignored(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"labels": "en", "theme": "dark"}), encoding="utf-8")
    config = load_config(path)
    assert config.labels == "en"
    assert not hasattr(config, "theme")


def test_save_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    config = AppConfig(database_url="sqlite:///x.db", last_owner="owner-7", invoice_prefix="F2024-")
    save_config(config, path)
    assert load_config(path) == config
    assert not path.with_suffix(".json.tmp").exists()
