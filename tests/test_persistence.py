"""Tests for wintheday/persistence.py."""

import json

import pytest
from conftest import make_tasks, record

from wintheday.ledger import blank_tasks, recompute
from wintheday.models import WIN, Ledger
from wintheday.persistence import (
    InvalidBackupError,
    backup_filename,
    export_backup,
    import_backup,
    load_or_init,
    save_ledger,
    seed_tasks,
    write_backup_file,
)
from wintheday.store import STORAGE_KEY, MemoryStore


def _stored(ledger_dict: dict) -> MemoryStore:
    return MemoryStore({STORAGE_KEY: json.dumps(ledger_dict).encode("utf-8")})


# ── Load / save ───────────────────────────────────────────────


def test_load_empty_store_gives_fresh_ledger():
    assert load_or_init(MemoryStore()) == Ledger()


@pytest.mark.parametrize("blob", [b"not json", b"[1, 2, 3]", b"\xff\xfe", b'"text"'])
def test_load_malformed_blob_gives_fresh_ledger(blob):
    ledger = load_or_init(MemoryStore({STORAGE_KEY: blob}))
    assert ledger.history == {}
    assert ledger.streak == 0


def test_save_then_load():
    store = MemoryStore()
    ledger = recompute("2026-02-10", make_tasks(5), {})
    save_ledger(store, ledger)
    assert load_or_init(store) == ledger
    data = json.loads(store.get(STORAGE_KEY))
    assert data["currentDate"] == "2026-02-10"
    assert data["history"]["2026-02-10"]["status"] == WIN
    assert data["bestStreak"] == 1


def test_seed_tasks_blank_for_new_day():
    ledger = Ledger.from_dict({"history": {"2026-02-09": record("2026-02-09", "WIN")}})
    assert seed_tasks(ledger, "2026-02-10") == blank_tasks()


def test_seed_tasks_uses_stored_day():
    ledger = Ledger.from_dict({"history": {"2026-02-10": record("2026-02-10", "IN_PROGRESS", done=3)}})
    tasks = seed_tasks(ledger, "2026-02-10")
    assert len(tasks) == 5
    assert sum(t.completed for t in tasks) == 3


def test_seed_tasks_pads_short_day():
    rec = record("2026-02-10", "IN_PROGRESS")
    rec["tasks"] = rec["tasks"][:2]
    tasks = seed_tasks(Ledger.from_dict({"history": {"2026-02-10": rec}}), "2026-02-10")
    assert len(tasks) == 5
    assert len({t.id for t in tasks}) == 5


# ── Import ────────────────────────────────────────────────────


def test_import_valid_backup_replaces_state():
    store = _stored({"history": {}, "streak": 0, "bestStreak": 0})
    blob = json.dumps({
        "currentDate": "2026-01-05",
        "history": {"2026-01-05": record("2026-01-05", "WIN")},
        "streak": 1,
        "bestStreak": 6,
    }).encode("utf-8")
    ledger = import_backup(store, blob)
    assert store.get(STORAGE_KEY) == blob
    assert ledger.best_streak == 6
    assert ledger.history["2026-01-05"].status == WIN


def test_import_without_history_is_rejected():
    stored = {"history": {"2026-02-10": record("2026-02-10", "WIN")}, "streak": 1, "bestStreak": 1}
    store = _stored(stored)
    before = store.get(STORAGE_KEY)
    with pytest.raises(InvalidBackupError, match="Invalid backup file format."):
        import_backup(store, json.dumps({"streak": 99}).encode("utf-8"))
    assert store.get(STORAGE_KEY) == before


def test_import_unparseable_is_rejected():
    store = _stored({"history": {}})
    before = store.get(STORAGE_KEY)
    with pytest.raises(InvalidBackupError, match="Failed to read backup file."):
        import_backup(store, b"{broken")
    assert store.get(STORAGE_KEY) == before


def test_invalid_backup_error_is_value_error():
    assert issubclass(InvalidBackupError, ValueError)


# ── Export ────────────────────────────────────────────────────


def test_backup_filename():
    assert backup_filename("2026-02-10") == "win-the-day-backup-2026-02-10.json"


def test_export_returns_stored_bytes():
    assert export_backup(MemoryStore()) is None
    store = _stored({"history": {}})
    assert export_backup(store) == store.get(STORAGE_KEY)


def test_write_backup_file(tmp_path):
    assert write_backup_file(MemoryStore(), tmp_path, "2026-02-10") is None
    store = _stored({"history": {"2026-02-10": record("2026-02-10", "WIN")}})
    path = write_backup_file(store, tmp_path / "backups", "2026-02-10")
    assert path == tmp_path / "backups" / "win-the-day-backup-2026-02-10.json"
    assert path.read_bytes() == store.get(STORAGE_KEY)


@pytest.mark.parametrize("blob", [b'{"history": null}', b'{"history": false}', b'{"history": 0}',
                                  b'{"history": ""}', b'{"history": []}'])
def test_import_non_object_history_is_rejected(blob):
    store = _stored({"history": {"2026-02-10": record("2026-02-10", "WIN")}})
    before = store.get(STORAGE_KEY)
    with pytest.raises(InvalidBackupError, match="Invalid backup file format."):
        import_backup(store, blob)
    assert store.get(STORAGE_KEY) == before


def test_import_empty_history_is_accepted():
    store = _stored({"history": {"2026-02-10": record("2026-02-10", "WIN")}})
    ledger = import_backup(store, b'{"history": {}}')
    assert ledger.history == {}
