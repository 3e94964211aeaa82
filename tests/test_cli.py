from __future__ import annotations

from pathlib import Path

import pytest

from zzpadmin.core.settings import AppConfig, load_config, save_config
from zzpadmin.main import main


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    save_config(
        AppConfig(
            database_url=f"sqlite:///{(tmp_path / 'test.db').as_posix()}",
            export_dir=str(tmp_path / "exports"),
        ),
        path,
    )
    return path


def test_seed_export_and_summary(config_file: Path, tmp_path: Path, capsys) -> None:
    cfg = ["--config", str(config_file)]
    assert main(cfg + ["init-db"]) == 0
    assert main(cfg + ["--owner", "owner-1", "seed-demo"]) == 0
    assert "Demo data created" in capsys.readouterr().out
    assert load_config(config_file).last_owner == "owner-1"

    # Owner is remembered from the previous run
    assert main(cfg + ["export", "--number", "F0001", "--format", "html"]) == 0
    written = Path(capsys.readouterr().out.strip())
    assert written == tmp_path / "exports" / "Factuur F0001.html"
    assert "FACTUUR" in written.read_text(encoding="utf-8")

    assert main(cfg + ["export", "--number", "F0002", "--out", str(tmp_path / "f2.pdf")]) == 0
    assert (tmp_path / "f2.pdf").read_bytes().startswith(b"%PDF")
    capsys.readouterr()

    assert main(cfg + ["summary"]) == 0
    out = capsys.readouterr().out
    assert "Clients:      2" in out
    assert "Invoices:     3" in out
    assert "F0002 Parkbeheer Utrecht" in out
    assert "6 days overdue" in out

    assert main(cfg + ["next-number"]) == 0
    assert capsys.readouterr().out.strip() == "F0004"

    assert main(cfg + ["seed-demo"]) == 0
    assert "nothing seeded" in capsys.readouterr().out


def test_unknown_invoice_reports_error(config_file: Path, capsys) -> None:
    assert main(["--config", str(config_file), "--owner", "owner-1", "export", "--number", "F9999"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_owner_required(config_file: Path, capsys) -> None:
    assert main(["--config", str(config_file), "summary"]) == 1
    assert "--owner" in capsys.readouterr().err
