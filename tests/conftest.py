"""Shared test fixtures for Win The Day tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from wintheday.models import Task


def make_tasks(done: int) -> list[Task]:
    """Five tasks with the first *done* of them completed."""
    return [Task(id=f"task-{i}", text=f"Task {i}", completed=i < done) for i in range(5)]


def record(day: str, status: str, done: int | None = None) -> dict:
    if done is None:
        done = 5 if status == "WIN" else 2
    return {
        "date": day,
        "tasks": [t.to_dict() for t in make_tasks(done)],
        "status": status,
    }


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary workspace with a profile and three days of history."""
    root = tmp_path / "workspace"
    (root / "data").mkdir(parents=True)

    profile = {
        "timezone": "UTC",
        "ai": {"model": "test-model", "temperature": 0.5},
    }
    (root / "profile.yaml").write_text(
        yaml.dump(profile, default_flow_style=False), encoding="utf-8"
    )

    state = {
        "currentDate": "2026-02-10",
        "history": {
            "2026-02-08": record("2026-02-08", "WIN"),
            "2026-02-09": record("2026-02-09", "WIN"),
            "2026-02-10": record("2026-02-10", "WIN"),
        },
        "streak": 3,
        "bestStreak": 4,
    }
    (root / "data" / "win-the-day-data.json").write_text(
        json.dumps(state, indent=2), encoding="utf-8"
    )

    monkeypatch.setenv("WINTHEDAY_ROOT", str(root))
    for name in ("WINTHEDAY_AI_API_KEY", "OPENAI_API_KEY", "WINTHEDAY_AI_MODEL",
                 "WINTHEDAY_AI_BASE_URL", "WINTHEDAY_USERNAME", "WINTHEDAY_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    return root
