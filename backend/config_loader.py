"""Load config.yaml from project root (override with TEACHER_SCORE_CONFIG)."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

_ROOT = Path(__file__).resolve().parent

CONFIG_ENV_VAR = "TEACHER_SCORE_CONFIG"


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    path = config_path or os.environ.get(CONFIG_ENV_VAR) or _ROOT / "config.yaml"
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def config_section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    """cfg[name] as a dict; {} when missing or null."""
    section = cfg.get(name)
    return section if isinstance(section, dict) else {}
