from __future__ import annotations

from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging

from zzpadmin.core.paths import config_path, default_database_url, default_export_dir

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
	database_url: str = field(default_factory=default_database_url)
	# Where exported invoices are written when no explicit path is given
	export_dir: str = field(default_factory=lambda: str(default_export_dir()))
	# Label set for rendered documents: "nl" or "en"
	labels: str = "nl"
	log_level: str = "INFO"
	# Prefix for suggested invoice numbers, e.g. "F2024-" -> F2024-0001
	invoice_prefix: str = "F"
	# Remember last used owner for the CLI
	last_owner: Optional[str] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
		# Merge provided values over defaults, ignore unknown keys
		defaults = asdict(cls())
		merged: Dict[str, Any] = {**defaults, **{k: v for k, v in data.items() if k in defaults}}
		return cls(**merged)

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


def _coerce_path(path: Optional[Union[str, Path]]) -> Path:
	return Path(path) if path is not None else config_path()


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
	"""
	Load config from JSON (UTF-8). If the file is missing, write defaults and return them.
	"""
	p = _coerce_path(path)
	if not p.exists():
		config = AppConfig()
		save_config(config, p)
		return config

	try:
		with p.open("r", encoding="utf-8") as f:
			raw: Dict[str, Any] = json.load(f)
	except (json.JSONDecodeError, OSError):
		# If unreadable/corrupt, fall back to defaults (do not overwrite automatically)
		logger.warning("Could not read config %s; using defaults", p)
		return AppConfig()

	return AppConfig.from_dict(raw if isinstance(raw, dict) else {})


def save_config(config: AppConfig, path: Optional[Union[str, Path]] = None) -> None:
	"""Save config to JSON (UTF-8), creating parent dirs if needed."""
	p = _coerce_path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	tmp = p.with_suffix(p.suffix + ".tmp")
	with tmp.open("w", encoding="utf-8", newline="\n") as f:
		json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
		f.write("\n")
	tmp.replace(p)
