"""Configuration loading and runtime bootstrapping."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_db_path(root: Path, config: dict[str, Any]) -> Path:
    """Resolve the SQLite path and make sure its directory exists."""
    paths_cfg = config.get("paths", {})
    db_path = (root / paths_cfg.get("db_path", "workspace/clear_path.db")).resolve()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path


def load_effective_config(root: Path) -> dict[str, Any]:
    """Load and merge ``config/default.yaml`` with ``config/models.yaml``."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    models_cfg = load_yaml(config_dir / "models.yaml")
    return merge_dicts(default_cfg, {"models": models_cfg})


def configure_logging(config: dict[str, Any], verbose: bool = False) -> None:
    """Apply the configured log level to the ``cp`` logger namespace."""
    level_name = "DEBUG" if verbose else str(config.get("logging", {}).get("level", "WARNING"))
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("cp").setLevel(level)
