"""Locations of the configuration and cache files, following XDG."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "ledger"


def _base(variable: str, fallback: str) -> Path:
    value = os.environ.get(variable)
    if value and os.path.isabs(value):
        return Path(value)
    return Path.home() / fallback


def _place(base: Path, filename: str) -> str:
    path = base / APP_NAME / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    return str(path)


def config_path(filename: str) -> str:
    """Path for a configuration file, creating its directory if needed."""
    return _place(_base("XDG_CONFIG_HOME", ".config"), filename)


def cache_path(filename: str) -> str:
    """Path for a cache file, creating its directory if needed."""
    return _place(_base("XDG_CACHE_HOME", ".cache"), filename)