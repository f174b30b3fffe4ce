"""Tests for wintheday/models.py."""

from wintheday.models import DayRecord, Ledger, Task, IN_PROGRESS, LOSS, WIN


def test_task_from_dict_defaults():
    t = Task.from_dict({"id": "task-0"})
    assert t.id == "task-0"
    assert t.text == ""
    assert t.completed is False


def test_day_record_unknown_status_falls_back():
    rec = DayRecord.from_dict({"date": "2026-02-10", "status": "maybe", "tasks": []})
    assert rec.status == IN_PROGRESS


def test_day_record_notes_only_serialized_when_set():
    rec = DayRecord(date="2026-02-10", status=LOSS)
    assert "notes" not in rec.to_dict()
    rec.notes = "sick day"
    assert rec.to_dict()["notes"] == "sick day"


def test_day_record_completed_count():
    rec = DayRecord.from_dict({
        "date": "2026-02-10",
        "tasks": [{"id": "a", "completed": True}, {"id": "b", "completed": False}, "junk"],
        "status": "IN_PROGRESS",
    })
    assert len(rec.tasks) == 2
    assert rec.completed_count() == 1


def test_ledger_from_dict_camel_case():
    ledger = Ledger.from_dict({
        "currentDate": "2026-02-10",
        "history": {
            "2026-02-10": {"date": "2026-02-10", "tasks": [], "status": "WIN"},
            "2026-02-09": "not a record",
        },
        "streak": 2,
        "bestStreak": 7,
        "unknownKey": True,
    })
    assert ledger.current_date == "2026-02-10"
    assert list(ledger.history) == ["2026-02-10"]
    assert ledger.history["2026-02-10"].status == WIN
    assert ledger.streak == 2
    assert ledger.best_streak == 7


def test_ledger_from_dict_fills_missing_date_from_key():
    ledger = Ledger.from_dict({"history": {"2026-02-10": {"status": "LOSS"}}})
    assert ledger.history["2026-02-10"].date == "2026-02-10"


def test_ledger_from_empty():
    ledger = Ledger.from_dict({})
    assert ledger.history == {}
    assert ledger.streak == 0
    assert ledger.best_streak == 0


def test_ledger_to_dict_keys():
    ledger = Ledger(current_date="2026-02-10", streak=1, best_streak=1)
    assert set(ledger.to_dict()) == {"currentDate", "history", "streak", "bestStreak"}


def test_ledger_bad_scalars_keep_history():
    ledger = Ledger.from_dict({
        "history": {"2026-02-09": {"date": "2026-02-09", "tasks": [], "status": "WIN"}},
        "streak": "2 days",
        "bestStreak": None,
    })
    assert list(ledger.history) == ["2026-02-09"]
    assert ledger.streak == 0
    assert ledger.best_streak == 0


def test_ledger_numeric_strings_and_negatives():
    ledger = Ledger.from_dict({"history": {}, "streak": "4", "bestStreak": -3})
    assert ledger.streak == 4
    assert ledger.best_streak == 0


def test_day_record_non_list_tasks_skips_only_tasks():
    ledger = Ledger.from_dict({
        "history": {
            "2026-02-07": {"date": "2026-02-07", "tasks": 5, "status": "LOSS"},
            "2026-02-08": {"date": "2026-02-08", "tasks": [], "status": "WIN"},
        },
    })
    assert set(ledger.history) == {"2026-02-07", "2026-02-08"}
    assert ledger.history["2026-02-07"].tasks == []
    assert ledger.history["2026-02-08"].status == WIN


def test_task_completed_requires_real_true():
    assert Task.from_dict({"id": "a", "completed": "false"}).completed is False
    assert Task.from_dict({"id": "a", "completed": 1}).completed is False
    assert Task.from_dict({"id": "a", "completed": True}).completed is True
