"""Ledger load/save and backup import/export for Win The Day."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from wintheday.fileio import write_bytes_atomic
from wintheday.ledger import blank_tasks, normalize_tasks
from wintheday.models import Ledger, Task
from wintheday.store import STORAGE_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class InvalidBackupError(ValueError):
    """A backup blob that cannot replace the current state."""


def _decode(blob: bytes) -> dict[str, Any]:
    """Parse a stored blob into a JSON object. Raises ValueError on anything else."""
    data = json.loads(blob.decode("utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def load_or_init(store: KeyValueStore) -> Ledger:
    """Load the ledger, or a fresh one if nothing usable is stored."""
    blob = store.get(STORAGE_KEY)
    if blob is None:
        return Ledger()
    try:
        return Ledger.from_dict(_decode(blob))
    except (ValueError, TypeError) as e:
        logger.warning("Failed to parse stored state, starting fresh: %s", e)
        return Ledger()


def seed_tasks(ledger: Ledger, today: str) -> list[Task]:
    """Tasks for the editor: today's stored list, or five blanks."""
    record = ledger.history.get(today)
    if record is None:
        return blank_tasks()
    return normalize_tasks(record.tasks)


def save_ledger(store: KeyValueStore, ledger: Ledger) -> None:
    blob = json.dumps(ledger.to_dict(), indent=2, ensure_ascii=False) + "\n"
    store.set(STORAGE_KEY, blob.encode("utf-8"))


# ── Backups ───────────────────────────────────────────────────


def backup_filename(today: str) -> str:
    return f"win-the-day-backup-{today}.json"


def export_backup(store: KeyValueStore) -> bytes | None:
    """The stored blob exactly as persisted, or None when nothing is stored."""
    return store.get(STORAGE_KEY)


def write_backup_file(store: KeyValueStore, directory: Path, today: str) -> Path | None:
    """Write the stored blob to ``<directory>/win-the-day-backup-<today>.json``."""
    blob = export_backup(store)
    if blob is None:
        return None
    path = Path(directory) / backup_filename(today)
    write_bytes_atomic(path, blob, suffix=".json")
    logger.info("Exported backup to %s", path)
    return path


def import_backup(store: KeyValueStore, blob: bytes) -> Ledger:
    """Replace the stored state with *blob* and return the reloaded ledger.

    The blob must be a JSON object whose ``history`` is an object; its shape
    is otherwise not checked. A rejected blob leaves the store untouched.
    """
    try:
        data = _decode(blob)
    except (ValueError, TypeError) as e:
        logger.warning("Rejected backup: %s", e)
        raise InvalidBackupError("Failed to read backup file.") from e
    if not isinstance(data.get("history"), dict):
        logger.warning("Rejected backup: history is missing or not an object")
        raise InvalidBackupError("Invalid backup file format.")

    store.set(STORAGE_KEY, bytes(blob))
    logger.info("Restored backup")
    return load_or_init(store)
