"""Day update pipeline shared by the TUI and the web app.

Every change to today's tasks runs the same pass:
1. Load the ledger from the store (fresh ledger on bad data)
2. Apply the edit to today's five tasks
3. Recompute status / streak / best streak
4. Persist the new ledger
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from wintheday.ledger import (
    apply_suggestions,
    recompute,
    set_task_text,
    toggle_task,
)
from wintheday.models import Ledger, Task
from wintheday.persistence import import_backup, load_or_init, save_ledger, seed_tasks
from wintheday.store import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class DayView:
    """What a front end needs to render today."""

    ledger: Ledger
    tasks: list[Task]
    status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.ledger.current_date,
            "status": self.status,
            "tasks": [t.to_dict() for t in self.tasks],
            "streak": self.ledger.streak,
            "bestStreak": self.ledger.best_streak,
        }


def update_tasks(store: KeyValueStore, today: str, tasks: list[Task]) -> DayView:
    """Recompute with *tasks* as today's list and persist the result."""
    prior = load_or_init(store)
    ledger = recompute(today, tasks, prior.history, prior.best_streak)
    save_ledger(store, ledger)
    status = ledger.history[today].status
    if status != (prior.history[today].status if today in prior.history else None):
        logger.info("%s is now %s (streak %d)", today, status, ledger.streak)
    return DayView(ledger=ledger, tasks=ledger.history[today].tasks, status=status)


def open_day(store: KeyValueStore, today: str) -> DayView:
    """Load state, seed today's tasks, and record today in the history."""
    ledger = load_or_init(store)
    return update_tasks(store, today, seed_tasks(ledger, today))


def current_tasks(store: KeyValueStore, today: str) -> list[Task]:
    return seed_tasks(load_or_init(store), today)


def toggle(store: KeyValueStore, today: str, task_id: str) -> DayView:
    return update_tasks(store, today, toggle_task(current_tasks(store, today), task_id))


def edit_text(store: KeyValueStore, today: str, task_id: str, text: str) -> DayView:
    return update_tasks(store, today, set_task_text(current_tasks(store, today), task_id, text))


def apply_suggested(store: KeyValueStore, today: str, texts: list[str]) -> DayView:
    return update_tasks(store, today, apply_suggestions(current_tasks(store, today), texts))


def restore_backup(store: KeyValueStore, today: str, blob: bytes) -> DayView:
    """Replace all state with a backup, then reopen today.

    Raises InvalidBackupError (store untouched) if the blob is rejected.
    """
    import_backup(store, blob)
    return open_day(store, today)

