"""Tests for cli/tui.py."""

import asyncio
import json

from conftest import record

import cli.tui as tui


def test_import_after_midnight_opens_the_new_day(workspace, monkeypatch):
    clock = {"today": "2026-02-11"}
    monkeypatch.setattr(tui, "today_str", lambda root=None: clock["today"])

    backup = workspace / "backup.json"
    backup.write_text(json.dumps({"history": {"2026-02-10": record("2026-02-10", "WIN")}}), encoding="utf-8")

    async def run() -> str:
        app = tui.WinTheDayApp(workspace)
        async with app.run_test() as pilot:
            await pilot.pause()
            clock["today"] = "2026-02-12"
            path_input = app.query_one("#import-input", tui.Input)
            path_input.display = True
            path_input.focus()
            path_input.value = str(backup)
            await pilot.press("enter")
            await pilot.pause()
            return app._today

    assert asyncio.run(run()) == "2026-02-12"
    stored = json.loads((workspace / "data" / "win-the-day-data.json").read_text(encoding="utf-8"))
    assert set(stored["history"]) == {"2026-02-10", "2026-02-12"}
