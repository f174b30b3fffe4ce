#!/usr/bin/env python3
"""Win The Day TUI: the Power List in the terminal, powered by Textual."""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.widgets import (
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
)

from wintheday import (
    TASKS_PER_DAY,
    WIN,
    DayView,
    FileStore,
    InvalidBackupError,
    apply_suggested,
    backups_dir,
    compute_stats,
    data_dir,
    edit_text,
    init_workspace,
    load_settings,
    log_dir,
    month_grid,
    open_day,
    restore_backup,
    shift_month,
    today_str,
    toggle,
    workspace_root,
    write_backup_file,
)
from wintheday.logging_setup import setup_logging
from wintheday.suggest import generate_tasks, get_motivation

logger = logging.getLogger("wintheday.tui")


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
    padding: 0 2;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

.task-row {
    height: auto;
}

.task-row Checkbox {
    width: auto;
    min-width: 4;
    height: auto;
    padding: 0 1 0 0;
}

.task-done Input {
    text-style: strike;
    opacity: 60%;
}

.task-input {
    width: 1fr;
    height: 3;
}

#day-status {
    height: auto;
    padding: 0 1;
    margin: 1 0 0 0;
}

#day-status.won {
    color: $success;
    text-style: bold;
}

#motivation {
    height: auto;
    padding: 0 1;
    color: $text-muted;
    text-style: italic;
}

#goal-input, #import-input {
    display: none;
    margin: 1 0 0 0;
}

#history-view, #stats-view {
    display: none;
    padding: 1 2;
}

#history-grid, #stats-info {
    height: auto;
    padding: 1 2;
    margin: 0 0 1 0;
    border: tall $primary-background-darken-2;
}

#week-table {
    height: auto;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class TaskRow(Horizontal):
    """One critical task slot: checkbox + editable text."""

    def __init__(self, index: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.index = index

    def compose(self) -> ComposeResult:
        yield Checkbox("", id=f"cb-{self.index}")
        yield Input(
            placeholder=f"Critical task #{self.index + 1}",
            id=f"txt-{self.index}",
            classes="task-input",
        )

    def on_mount(self) -> None:
        self.add_class("task-row")


def _slot(widget_id: str | None, prefix: str) -> int | None:
    if not widget_id or not widget_id.startswith(prefix):
        return None
    suffix = widget_id[len(prefix):]
    return int(suffix) if suffix.isdigit() else None


# ── Main app ───────────────────────────────────────────────────


class WinTheDayApp(App):
    """Win The Day: five critical tasks, every day."""

    TITLE = "Win The Day"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("d", "show_dashboard", "Today"),
        Binding("h", "show_history", "History"),
        Binding("s", "show_stats", "Stats"),
        Binding("a", "ai_suggest", "AI Suggest"),
        Binding("b", "export_backup", "Backup"),
        Binding("r", "import_backup", "Restore"),
        Binding("[", "prev_month", "Prev month", show=False),
        Binding("]", "next_month", "Next month", show=False),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit", "Quit"),
    ]

    current_view: reactive[str] = reactive("dashboard")

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Month paging only applies to the history view."""
        if action in ("prev_month", "next_month"):
            return True if self.current_view == "history" else None
        return True

    def __init__(self, root: Path | None = None) -> None:
        super().__init__()
        self._root = root or workspace_root()
        self._store = FileStore(data_dir(self._root))
        self._today = today_str(self._root)
        self._view: DayView | None = None
        d = date.fromisoformat(self._today)
        self._month = (d.year, d.month)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            VerticalScroll(
                Label("The Power List", classes="section-title"),
                Label("Complete 5 critical tasks to win."),
                Vertical(
                    *[TaskRow(i, id=f"row-{i}") for i in range(TASKS_PER_DAY)],
                    id="task-list",
                ),
                Static(id="day-status"),
                Static(id="motivation"),
                Input(placeholder="What is your main goal right now?", id="goal-input"),
                Input(placeholder="Path to a backup .json file", id="import-input"),
                id="dashboard-view",
            ),
            VerticalScroll(
                Label("History", classes="section-title"),
                Static(id="history-grid"),
                id="history-view",
            ),
            VerticalScroll(
                Label("Stats", classes="section-title"),
                Static(id="stats-info"),
                Label("Last 7 days (tasks completed)", classes="section-title"),
                DataTable(id="week-table"),
                id="stats-view",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#week-table", DataTable).add_columns("Day", "Date", "Done", "")
        self._load_data()

    # ── Data ───────────────────────────────────────────────────

    def _load_data(self) -> None:
        """Open today and refresh every view."""
        self._today = today_str(self._root)
        self._view = open_day(self._store, self._today)
        self._render_view(self._view)
        self._fetch_motivation()

    def _check_day_rollover(self) -> bool:
        """Reload if midnight passed while the app was open."""
        if today_str(self._root) != self._today:
            self._load_data()
            return True
        return False

    def _sync_task_widgets(self) -> None:
        # Change handlers compare against self._view, so these writes are no-ops for them
        for i, task in enumerate(self._view.tasks):
            self.query_one(f"#cb-{i}", Checkbox).value = task.completed
            text_input = self.query_one(f"#txt-{i}", Input)
            if text_input.value != task.text:
                text_input.value = task.text
            self.query_one(f"#row-{i}").set_class(task.completed, "task-done")

    def _render_view(self, view: DayView) -> None:
        previous = self._view.status if self._view else None
        self._view = view
        self._sync_task_widgets()

        status_widget = self.query_one("#day-status", Static)
        if view.status == WIN:
            status_widget.update("DAY WON. All 5 tasks complete.")
        else:
            done = sum(1 for t in view.tasks if t.completed)
            status_widget.update(f"{done}/{TASKS_PER_DAY} complete")
        status_widget.set_class(view.status == WIN, "won")

        self.sub_title = f"Streak: {view.ledger.streak}  Best: {view.ledger.best_streak}"
        self._render_history()
        self._render_stats()
        if previous is not None and previous != view.status:
            self._fetch_motivation()

    def _render_history(self) -> None:
        year, month = self._month
        grid = month_grid(self._view.ledger.history, year, month, self._today)
        lines = [f"{grid.title}   ([ / ] to change month)", "", "  S   M   T   W   T   F   S"]
        for week in grid.weeks():
            cells = []
            for cell in week:
                if cell is None:
                    cells.append("   ")
                    continue
                label = cell.mark or str(cell.day)
                if cell.is_today:
                    label = f"*{label}"
                cells.append(label.rjust(3))
            lines.append(" ".join(cells))
        s = grid.summary
        lines += ["", f"Wins: {s['wins']}   Losses: {s['losses']}   Win rate: {s['winRate']}%"]
        self.query_one("#history-grid", Static).update("\n".join(lines))

    def _render_stats(self) -> None:
        stats = compute_stats(self._view.ledger, self._today)
        info = [
            f"Current streak: {stats.streak} days",
            f"Best streak: {stats.best_streak} days",
        ]
        if stats.total_wins + stats.total_losses == 0:
            info.append("Win / Loss: no data yet.")
        else:
            info.append(f"Win / Loss: {stats.total_wins} / {stats.total_losses}  ({stats.win_rate}% won)")
        self.query_one("#stats-info", Static).update("\n".join(info))

        table = self.query_one("#week-table", DataTable)
        table.clear()
        for day in stats.last_seven_days:
            table.add_row(day["day"], day["date"], str(day["completed"]), "#" * day["completed"])

    # ── Edits: every change recomputes and persists ────────────

    @on(Checkbox.Changed)
    def _on_checkbox_toggle(self, event: Checkbox.Changed) -> None:
        index = _slot(event.checkbox.id, "cb-")
        if index is None or self._view is None:
            return
        task = self._view.tasks[index]
        if task.completed == event.value:
            return
        if self._check_day_rollover():
            return
        self._render_view(toggle(self._store, self._today, task.id))

    @on(Input.Changed)
    def _on_text_change(self, event: Input.Changed) -> None:
        index = _slot(event.input.id, "txt-")
        if index is None or self._view is None:
            return
        task = self._view.tasks[index]
        if task.text == event.value:
            return
        if self._check_day_rollover():
            return
        self._render_view(edit_text(self._store, self._today, task.id, event.value))

    @on(Input.Submitted, "#goal-input")
    def _on_goal_submitted(self, event: Input.Submitted) -> None:
        goal = event.value.strip()
        event.input.display = False
        event.input.value = ""
        if not goal:
            return
        self.notify("Generating tasks…", title="AI Suggest")
        self._suggest_tasks(goal)

    @on(Input.Submitted, "#import-input")
    def _on_import_submitted(self, event: Input.Submitted) -> None:
        raw = event.value.strip()
        event.input.display = False
        event.input.value = ""
        if not raw:
            return
        path = Path(raw).expanduser()
        try:
            blob = path.read_bytes()
        except OSError as e:
            logger.warning("Could not read backup %s: %s", path, e)
            self.notify("Failed to read backup file.", title="Restore Failed", severity="error")
            return
        self._check_day_rollover()
        try:
            view = restore_backup(self._store, self._today, blob)
        except InvalidBackupError as e:
            self.notify(str(e), title="Restore Failed", severity="error")
            return
        self._render_view(view)
        self.notify("Data restored successfully!", title="Restore")

    # ── Workers ────────────────────────────────────────────────

    @work(exclusive=True, group="motivation")
    async def _fetch_motivation(self) -> None:
        view = self._view
        quote = await get_motivation(view.ledger.streak, view.status, settings=load_settings(self._root))
        self.query_one("#motivation", Static).update(f'"{quote}"')

    @work(exclusive=True, group="suggest")
    async def _suggest_tasks(self, goal: str) -> None:
        suggestion = await generate_tasks(goal, settings=load_settings(self._root))
        self._check_day_rollover()
        self._render_view(apply_suggested(self._store, self._today, suggestion.tasks))
        self.query_one("#motivation", Static).update(f'"{suggestion.quote}"')

    # ── Actions ────────────────────────────────────────────────

    def action_show_dashboard(self) -> None:
        self._switch_to("dashboard")

    def action_show_history(self) -> None:
        self._switch_to("history")

    def action_show_stats(self) -> None:
        self._switch_to("stats")

    def action_ai_suggest(self) -> None:
        self._switch_to("dashboard")
        goal = self.query_one("#goal-input", Input)
        goal.display = True
        goal.focus()

    def action_import_backup(self) -> None:
        self._switch_to("dashboard")
        path_input = self.query_one("#import-input", Input)
        path_input.display = True
        path_input.focus()

    def action_export_backup(self) -> None:
        path = write_backup_file(self._store, backups_dir(self._root), self._today)
        if path is None:
            self.notify("Nothing to back up yet.", title="Backup", severity="warning")
        else:
            self.notify(f"Saved {path}", title="Backup")

    def action_prev_month(self) -> None:
        self._month = shift_month(*self._month, -1)
        self._render_history()

    def action_next_month(self) -> None:
        self._month = shift_month(*self._month, 1)
        self._render_history()

    def action_blur_focus(self) -> None:
        for widget_id in ("#goal-input", "#import-input"):
            self.query_one(widget_id, Input).display = False
        self.set_focus(None)

    def _switch_to(self, view: str) -> None:
        for name in ("dashboard", "history", "stats"):
            self.query_one(f"#{name}-view").display = name == view
        self.current_view = view
        self.refresh_bindings()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    try:
        init_workspace(root)
    except OSError as e:
        print(f"Cannot create workspace at {root}: {e}")
        print("Set WINTHEDAY_ROOT to a writable directory.")
        sys.exit(1)
    setup_logging(log_dir=log_dir(root), console=False)

    app = WinTheDayApp(root)
    app.run()


if __name__ == "__main__":
    main()
