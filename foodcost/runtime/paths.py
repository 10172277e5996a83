"""Centralized path management for foodcost data files.

All persisted state lives under one data directory:

    ~/.foodcost/            (or $FOODCOST_HOME)
    ├── settings.toml       - optional configuration overrides
    ├── store/              - key-value store (one JSON file per key)
    └── exports/            - CSV cost reports
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

HOME_ENV_VAR = "FOODCOST_HOME"


def _get_data_root() -> Path:
    """Determine the data directory from the environment."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path("~/.foodcost").expanduser()


@dataclass
class ProjectPaths:
    """Container for all foodcost data paths."""

    root: Path = field(default_factory=_get_data_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    @property
    def settings(self) -> Path:
        """Optional settings TOML file."""
        return self.root / "settings.toml"

    @property
    def store(self) -> Path:
        """Key-value store directory (catalog, saved recipes)."""
        return self.root / "store"

    @property
    def exports(self) -> Path:
        """Default directory for exported cost reports."""
        return self.root / "exports"

    def ensure_directories(self) -> None:
        self.store.mkdir(parents=True, exist_ok=True)
        self.exports.mkdir(parents=True, exist_ok=True)


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached paths so the next get_paths() re-reads the environment."""
    global _paths
    _paths = None
