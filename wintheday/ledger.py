"""Day ledger: win/loss status and streak recomputation for Win The Day.

Everything here is pure. The current date is always passed in by the
caller; nothing in this module reads the clock.

The recomputation pipeline:
1. Count completed tasks for today
2. Status: WIN iff all five are complete, otherwise IN_PROGRESS
3. Write today's record into a copy of the history
4. Settle earlier unfinished days as LOSS
5. Scan backwards from yesterday for consecutive WIN days
6. Add today if won; fold into the best streak
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

from wintheday.models import (
    IN_PROGRESS,
    LOSS,
    TASKS_PER_DAY,
    WIN,
    DayRecord,
    Ledger,
    Task,
)


# ── Task list helpers ─────────────────────────────────────────


def blank_tasks() -> list[Task]:
    """Five empty, uncompleted tasks with stable ids."""
    return [Task(id=f"task-{i}") for i in range(TASKS_PER_DAY)]


def normalize_tasks(tasks: list[Task]) -> list[Task]:
    """Pad with blank tasks or truncate so exactly five remain."""
    out = [replace(t) for t in tasks[:TASKS_PER_DAY]]
    used = {t.id for t in out}
    for blank in blank_tasks():
        if len(out) >= TASKS_PER_DAY:
            break
        if blank.id not in used:
            out.append(blank)
    return out


def completed_count(tasks: list[Task]) -> int:
    return sum(1 for t in tasks if t.completed)


def day_status(tasks: list[Task]) -> str:
    """WIN iff every one of the five tasks is complete."""
    return WIN if completed_count(tasks) == TASKS_PER_DAY else IN_PROGRESS


def toggle_task(tasks: list[Task], task_id: str) -> list[Task]:
    """Flip the completion flag of one task. Unknown ids leave the list unchanged."""
    return [replace(t, completed=not t.completed) if t.id == task_id else replace(t) for t in tasks]


def set_task_text(tasks: list[Task], task_id: str, text: str) -> list[Task]:
    return [replace(t, text=text) if t.id == task_id else replace(t) for t in tasks]


def apply_suggestions(tasks: list[Task], texts: list[str]) -> list[Task]:
    """Map suggested texts onto the tasks by position and reset completion.

    Positions without a (non-empty) suggestion keep their current text.
    """
    out = []
    for i, t in enumerate(tasks):
        text = texts[i] if i < len(texts) and texts[i] else t.text
        out.append(replace(t, text=text, completed=False))
    return out


# ── Streak & settlement ───────────────────────────────────────


def settle_past_days(history: dict[str, DayRecord], today: str) -> dict[str, DayRecord]:
    """Return a copy of *history* where unfinished days before *today* are LOSS."""
    settled = {}
    for day, record in history.items():
        if day < today and record.status == IN_PROGRESS:
            settled[day] = replace(record, status=LOSS)
        else:
            settled[day] = record
    return settled


def count_streak(history: dict[str, DayRecord], today: str, today_won: bool) -> int:
    """Count consecutive WIN days ending yesterday, plus today if won.

    A day with no record breaks the run exactly like a LOSS does.
    """
    streak = 0
    check = date.fromisoformat(today) - timedelta(days=1)
    while True:
        record = history.get(check.isoformat())
        if record is None or record.status != WIN:
            break
        streak += 1
        check -= timedelta(days=1)
    if today_won:
        streak += 1
    return streak


def recompute(
    today: str,
    todays_tasks: list[Task],
    prior_history: dict[str, DayRecord],
    prior_best_streak: int = 0,
) -> Ledger:
    """Rebuild the ledger after today's task list changed.

    *prior_history* is not mutated. The same inputs always produce the
    same ledger.
    """
    status = day_status(todays_tasks)

    new_history = dict(prior_history)
    new_history[today] = DayRecord(
        date=today,
        tasks=[replace(t) for t in todays_tasks],
        status=status,
        notes=prior_history[today].notes if today in prior_history else "",
    )
    new_history = settle_past_days(new_history, today)

    streak = count_streak(new_history, today, status == WIN)
    best_streak = max(prior_best_streak, streak)

    return Ledger(
        current_date=today,
        history=new_history,
        streak=streak,
        best_streak=best_streak,
    )
