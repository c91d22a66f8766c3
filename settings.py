#!/usr/bin/env python3
"""
Standalone settings loader for wordchain.

Packaged defaults live in wordchain/configs/app.yaml. A user file named by
the WORDCHAIN_CONFIG environment variable is merged over them key by key.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any
import os

import yaml

PROJECT_ROOT = Path(__file__).resolve().parent
CONFIG_DIR = PROJECT_ROOT / "wordchain" / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"
CONFIG_ENV_VAR = "WORDCHAIN_CONFIG"


def _read_yaml(path: Path) -> dict:
    data = yaml.safe_load(path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a mapping: {path}")
    return data


def _merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def user_config_path() -> Path | None:
    """Path named by WORDCHAIN_CONFIG, if set."""
    value = os.environ.get(CONFIG_ENV_VAR)
    return resolve_path(value) if value else None


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    if not APP_CONFIG_PATH.exists():
        raise FileNotFoundError(f"Missing app config: {APP_CONFIG_PATH}")
    data = _read_yaml(APP_CONFIG_PATH)

    user_path = user_config_path()
    if user_path is not None:
        if not user_path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to a missing file: {user_path}")
        data = _merge(data, _read_yaml(user_path))
    return data


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path."""
    data = load_app_config()
    current: Any = data
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def resolve_path(value: str, base: Path | None = None) -> Path:
    """Resolve a path string relative to the working directory (unless absolute)."""
    if value is None:
        raise ValueError("path value is required")
    expanded = os.path.expanduser(str(value))
    path = Path(expanded)
    if not path.is_absolute():
        base = base or Path.cwd()
        path = (base / path).resolve()
    return path


__all__ = [
    "load_app_config",
    "get_setting",
    "resolve_path",
    "user_config_path",
    "PROJECT_ROOT",
    "APP_CONFIG_PATH",
    "CONFIG_ENV_VAR",
]
