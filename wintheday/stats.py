"""History statistics for Win The Day.

Win/loss totals, win rate, the seven-day completion chart, the monthly
calendar grid, and streak runs, all computed from the ledger history.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from wintheday.models import LOSS, TASKS_PER_DAY, WIN, DayRecord, Ledger


DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def win_loss_totals(history: dict[str, DayRecord]) -> tuple[int, int]:
    wins = sum(1 for r in history.values() if r.status == WIN)
    losses = sum(1 for r in history.values() if r.status == LOSS)
    return wins, losses


def win_rate(wins: int, losses: int) -> int:
    """Percentage of decided days won, rounded half up; 0 with no decided days."""
    total = wins + losses
    if total == 0:
        return 0
    return (wins * 200 + total) // (total * 2)


def last_seven_days(history: dict[str, DayRecord], today: str) -> list[dict[str, Any]]:
    """Tasks completed per day for the week ending today, oldest first.

    A WIN counts as all five; days without a record count as zero.
    """
    end = date.fromisoformat(today)
    days = []
    for i in range(6, -1, -1):
        d = end - timedelta(days=i)
        record = history.get(d.isoformat())
        if record is None:
            completed = 0
        elif record.status == WIN:
            completed = TASKS_PER_DAY
        else:
            completed = record.completed_count()
        days.append({"date": d.isoformat(), "day": DAY_NAMES[d.weekday()], "completed": completed})
    return days


def _month_days(year: int, month: int) -> list[date]:
    count = calendar.monthrange(year, month)[1]
    return [date(year, month, n) for n in range(1, count + 1)]


def month_summary(history: dict[str, DayRecord], year: int, month: int) -> dict[str, int]:
    wins = losses = 0
    for d in _month_days(year, month):
        record = history.get(d.isoformat())
        if record is None:
            continue
        if record.status == WIN:
            wins += 1
        elif record.status == LOSS:
            losses += 1
    return {"wins": wins, "losses": losses, "winRate": win_rate(wins, losses)}


# ── Month grid ────────────────────────────────────────────────


@dataclass
class DayCell:
    date: str
    day: int
    mark: str = ""  # W, L or empty
    is_today: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "day": self.day, "mark": self.mark, "isToday": self.is_today}


@dataclass
class MonthGrid:
    year: int
    month: int
    leading_blanks: int = 0  # Sunday-first calendar
    cells: list[DayCell] = field(default_factory=list)
    summary: dict[str, int] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def weeks(self) -> list[list[DayCell | None]]:
        """Rows of seven, padded with None before the 1st and after the last day."""
        slots: list[DayCell | None] = [None] * self.leading_blanks + list(self.cells)
        while len(slots) % 7:
            slots.append(None)
        return [slots[i:i + 7] for i in range(0, len(slots), 7)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "title": self.title,
            "leadingBlanks": self.leading_blanks,
            "cells": [c.to_dict() for c in self.cells],
            "summary": self.summary,
        }


def month_grid(history: dict[str, DayRecord], year: int, month: int, today: str) -> MonthGrid:
    days = _month_days(year, month)
    grid = MonthGrid(
        year=year,
        month=month,
        # date.weekday() is Monday=0; shift so Sunday=0
        leading_blanks=(days[0].weekday() + 1) % 7,
        summary=month_summary(history, year, month),
    )
    for d in days:
        iso = d.isoformat()
        record = history.get(iso)
        mark = ""
        if record is not None and record.status == WIN:
            mark = "W"
        elif record is not None and record.status == LOSS:
            mark = "L"
        grid.cells.append(DayCell(date=iso, day=d.day, mark=mark, is_today=iso == today))
    return grid


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


# ── Streak runs ───────────────────────────────────────────────


def streak_runs(history: dict[str, DayRecord]) -> list[dict[str, Any]]:
    """Every maximal run of consecutive WIN days, oldest first."""
    runs: list[dict[str, Any]] = []
    prev: date | None = None
    for day in sorted(history):
        if history[day].status != WIN:
            prev = None
            continue
        d = date.fromisoformat(day)
        if prev is not None and d - prev == timedelta(days=1):
            runs[-1]["end"] = day
            runs[-1]["length"] += 1
        else:
            runs.append({"start": day, "end": day, "length": 1})
        prev = d
    return runs


# ── Summary ───────────────────────────────────────────────────


@dataclass
class StatsSummary:
    streak: int = 0
    best_streak: int = 0
    total_wins: int = 0
    total_losses: int = 0
    win_rate: int = 0
    total_days_tracked: int = 0
    last_seven_days: list[dict[str, Any]] = field(default_factory=list)
    streak_runs: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "streak": self.streak,
            "bestStreak": self.best_streak,
            "totalWins": self.total_wins,
            "totalLosses": self.total_losses,
            "winRate": self.win_rate,
            "totalDaysTracked": self.total_days_tracked,
            "lastSevenDays": self.last_seven_days,
            "streakRuns": self.streak_runs,
        }


def compute_stats(ledger: Ledger, today: str) -> StatsSummary:
    wins, losses = win_loss_totals(ledger.history)
    return StatsSummary(
        streak=ledger.streak,
        best_streak=ledger.best_streak,
        total_wins=wins,
        total_losses=losses,
        win_rate=win_rate(wins, losses),
        total_days_tracked=len(ledger.history),
        last_seven_days=last_seven_days(ledger.history, today),
        streak_runs=streak_runs(ledger.history),
    )
