"""Typed dataclasses for the Win The Day data model.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


WIN = "WIN"
LOSS = "LOSS"
IN_PROGRESS = "IN_PROGRESS"

VALID_STATUSES = {WIN, LOSS, IN_PROGRESS}

TASKS_PER_DAY = 5


def _as_count(raw: Any) -> int:
    """Non-negative int, or 0 for anything that is not a number."""
    if isinstance(raw, bool):
        return 0
    try:
        return max(0, int(raw))
    except (TypeError, ValueError, OverflowError):
        return 0


# ── Tasks ─────────────────────────────────────────────────────


@dataclass
class Task:
    id: str = ""
    text: str = ""
    completed: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        return cls(
            id=str(d.get("id", "")),
            text=str(d.get("text", "") or ""),
            completed=d.get("completed") is True,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "completed": self.completed}


# ── Day records ───────────────────────────────────────────────


@dataclass
class DayRecord:
    date: str = ""  # YYYY-MM-DD
    tasks: list[Task] = field(default_factory=list)
    status: str = IN_PROGRESS
    notes: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DayRecord:
        raw_tasks = d.get("tasks")
        if not isinstance(raw_tasks, list):
            raw_tasks = []
        tasks = [Task.from_dict(t) for t in raw_tasks if isinstance(t, dict)]
        status = str(d.get("status", IN_PROGRESS)).upper()
        if status not in VALID_STATUSES:
            status = IN_PROGRESS
        return cls(
            date=str(d.get("date", "")),
            tasks=tasks,
            status=status,
            notes=str(d.get("notes", "") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "date": self.date,
            "tasks": [t.to_dict() for t in self.tasks],
            "status": self.status,
        }
        if self.notes:
            d["notes"] = self.notes
        return d

    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)


# ── Ledger ────────────────────────────────────────────────────


@dataclass
class Ledger:
    current_date: str = ""
    history: dict[str, DayRecord] = field(default_factory=dict)
    streak: int = 0
    best_streak: int = 0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Ledger:
        if not d or not isinstance(d, dict):
            return cls()
        history = {}
        raw_history = d.get("history") or {}
        if isinstance(raw_history, dict):
            for day, rd in raw_history.items():
                if isinstance(rd, dict):
                    record = DayRecord.from_dict(rd)
                    record.date = record.date or str(day)
                    history[str(day)] = record
        return cls(
            current_date=str(d.get("currentDate", "") or ""),
            history=history,
            streak=_as_count(d.get("streak")),
            best_streak=_as_count(d.get("bestStreak")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentDate": self.current_date,
            "history": {day: rec.to_dict() for day, rec in sorted(self.history.items())},
            "streak": self.streak,
            "bestStreak": self.best_streak,
        }
