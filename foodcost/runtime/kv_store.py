"""Key-value storage boundary for persisted application state."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol

from foodcost.runtime.logging import get_logger
from foodcost.runtime.paths import get_paths

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Minimal get/set contract the persistence helpers call through."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store, used for tests and as a fallback."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """One ``<key>.json`` file per key inside a directory."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory if directory is not None else get_paths().store

    def _path(self, key: str) -> Path:
        safe_key = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
        return self.directory / f"{safe_key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)

        # Write to a sibling temp file and rename so readers never see a partial file
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d bytes to %s", len(value), path)
