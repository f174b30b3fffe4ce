"""Key-value byte stores backing the ledger.

The ledger is saved as one blob under STORAGE_KEY. FileStore keeps one
file per key in a directory; MemoryStore is a dict used by tests and
throwaway sessions.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

from wintheday.fileio import read_bytes, write_bytes_atomic

logger = logging.getLogger(__name__)

STORAGE_KEY = "win-the-day-data"

_KEY_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class KeyValueStore(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...


class MemoryStore:
    """In-memory store."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)


class FileStore:
    """Directory-backed store: ``<directory>/<key>.json``, written atomically."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        return read_bytes(self._path(key))

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        write_bytes_atomic(path, value, suffix=".json")
        logger.debug("Wrote %d bytes to %s", len(value), path)
