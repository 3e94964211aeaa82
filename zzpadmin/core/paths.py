from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_ENV = "ZZPADMIN_CONFIG"


def is_frozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def user_writable_dir() -> Path:
    """Directory suitable for user-writable files (config.json, the SQLite file).

    - In PyInstaller onefile, prefer the directory containing the executable.
    - In dev, use the project root.
    """
    if is_frozen():
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[2]


def config_path() -> Path:
    """Location for config.json; ZZPADMIN_CONFIG overrides it."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    return user_writable_dir() / "config.json"


def default_database_url() -> str:
    # Use posix path for SQLAlchemy URL compatibility on Windows
    return f"sqlite:///{(user_writable_dir() / 'zzpadmin.db').as_posix()}"


def default_export_dir() -> Path:
    return Path.home() / "Documents" / "Facturen"
