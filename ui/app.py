from __future__ import annotations

import os
import secrets
from datetime import date
from typing import Any

from wintheday import (
    InvalidBackupError,
    FileStore,
    workspace_root as _workspace_root,
    today_str,
    data_dir,
    open_day,
    update_tasks,
    current_tasks,
    toggle,
    edit_text,
    apply_suggested,
    restore_backup,
    export_backup,
    backup_filename,
    normalize_tasks,
    compute_stats,
    month_grid,
    Task,
    TASKS_PER_DAY,
)
from wintheday.config import load_settings
from wintheday.suggest import generate_tasks, get_motivation

from fastapi import FastAPI, Form, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi import Body
from fastapi.security import HTTPBasic, HTTPBasicCredentials


# ── Helpers ───────────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _store() -> FileStore:
    return FileStore(data_dir(_workspace_root()))


def _today() -> str:
    return today_str(_workspace_root())


def _require_task(task_id: str, today: str) -> None:
    if not any(t.id == task_id for t in current_tasks(_store(), today)):
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="Win The Day", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("WINTHEDAY_USERNAME", "")
    expected_password = os.environ.get("WINTHEDAY_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── HTML dashboard ────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    today = _today()
    view = open_day(_store(), today)
    d = date.fromisoformat(today)
    grid = month_grid(view.ledger.history, d.year, d.month, today)

    rows = []
    for t in view.tasks:
        mark = "x" if t.completed else " "
        rows.append(
            f'<li><form method="post" action="/toggle/{_escape(t.id)}" style="display:inline">'
            f'<button type="submit">[{mark}]</button></form> '
            f'<form method="post" action="/save_text/{_escape(t.id)}" style="display:inline">'
            f'<input name="text" value="{_escape(t.text)}" placeholder="Critical task"/></form></li>'
        )

    week_rows = []
    for week in grid.weeks():
        cells = []
        for cell in week:
            if cell is None:
                cells.append("<td></td>")
                continue
            label = cell.mark or str(cell.day)
            style = ' style="font-weight:bold"' if cell.is_today else ""
            cells.append(f"<td{style}>{label}</td>")
        week_rows.append("<tr>" + "".join(cells) + "</tr>")

    summary = grid.summary
    html = f"""<!doctype html>
<html><head><meta charset="utf-8"><title>Win The Day</title></head>
<body>
<h1>Win The Day</h1>
<p>Streak: <b>{view.ledger.streak}</b> &middot; Best: <b>{view.ledger.best_streak}</b> &middot; Today: <b>{view.status}</b></p>
<h2>The Power List</h2>
<ol>{''.join(rows)}</ol>
<h2>{_escape(grid.title)}</h2>
<table><tr><th>S</th><th>M</th><th>T</th><th>W</th><th>T</th><th>F</th><th>S</th></tr>{''.join(week_rows)}</table>
<p>Wins {summary['wins']} &middot; Losses {summary['losses']} &middot; Win rate {summary['winRate']}%</p>
<p><a href="/api/export">Backup data</a></p>
</body></html>"""
    return HTMLResponse(html)


@app.post("/toggle/{task_id}")
def toggle_form(task_id: str, username: str = Depends(get_current_user)) -> RedirectResponse:
    today = _today()
    _require_task(task_id, today)
    toggle(_store(), today, task_id)
    return RedirectResponse(url="/", status_code=303)


@app.post("/save_text/{task_id}")
def save_text_form(task_id: str, text: str = Form(""), username: str = Depends(get_current_user)) -> RedirectResponse:
    today = _today()
    _require_task(task_id, today)
    edit_text(_store(), today, task_id, text)
    return RedirectResponse(url="/", status_code=303)


# ── JSON API ──────────────────────────────────────────────────

@app.get("/api/state")
def api_get_state(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Today's tasks, status and streaks."""
    return open_day(_store(), _today()).to_dict()


@app.put("/api/tasks")
def api_replace_tasks(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Replace today's five tasks."""
    raw = payload.get("tasks")
    if not isinstance(raw, list) or len(raw) != TASKS_PER_DAY or not all(isinstance(t, dict) for t in raw):
        raise HTTPException(status_code=400, detail=f"tasks must be a list of {TASKS_PER_DAY} objects")
    tasks = normalize_tasks([Task.from_dict(t) for t in raw])
    if len({t.id for t in tasks}) != TASKS_PER_DAY or not all(t.id for t in tasks):
        raise HTTPException(status_code=400, detail="task ids must be unique and non-empty")
    return update_tasks(_store(), _today(), tasks).to_dict()


@app.post("/api/tasks/{task_id}/toggle")
def api_toggle_task(task_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    today = _today()
    _require_task(task_id, today)
    return toggle(_store(), today, task_id).to_dict()


@app.put("/api/tasks/{task_id}")
def api_update_task_text(task_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    today = _today()
    _require_task(task_id, today)
    return edit_text(_store(), today, task_id, str(payload.get("text", ""))).to_dict()


@app.get("/api/stats")
def api_get_stats(username: str = Depends(get_current_user)) -> dict[str, Any]:
    today = _today()
    return compute_stats(open_day(_store(), today).ledger, today).to_dict()


@app.get("/api/history")
def api_get_history(year: int | None = None, month: int | None = None, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Calendar grid for one month (defaults to the current month)."""
    today = _today()
    d = date.fromisoformat(today)
    year = year or d.year
    month = month or d.month
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise HTTPException(status_code=400, detail=f"Invalid month: {year}-{month}")
    return month_grid(open_day(_store(), today).ledger.history, year, month, today).to_dict()


@app.get("/api/export")
def api_export(username: str = Depends(get_current_user)) -> Response:
    blob = export_backup(_store())
    if blob is None:
        raise HTTPException(status_code=404, detail="Nothing to export yet")
    filename = backup_filename(_today())
    return Response(
        content=blob,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/api/import")
async def api_import(request: Request, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Restore a backup blob; the current state is kept if it is rejected."""
    blob = await request.body()
    try:
        view = restore_backup(_store(), _today(), blob)
    except InvalidBackupError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "state": view.to_dict()}


@app.post("/api/suggest")
async def api_suggest(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """AI task suggestions for a goal; optionally written into today's list."""
    goal = str(payload.get("goal", "")).strip()
    if not goal:
        raise HTTPException(status_code=400, detail="goal is required")
    suggestion = await generate_tasks(goal, settings=load_settings(_workspace_root()))
    result: dict[str, Any] = {"suggestion": suggestion.to_dict()}
    if payload.get("apply"):
        result["state"] = apply_suggested(_store(), _today(), suggestion.tasks).to_dict()
    return result


@app.get("/api/motivation")
async def api_motivation(username: str = Depends(get_current_user)) -> dict[str, Any]:
    today = _today()
    view = open_day(_store(), today)
    ledger = view.ledger
    day_status = view.status
    quote = await get_motivation(ledger.streak, day_status, settings=load_settings(_workspace_root()))
    return {"quote": quote, "streak": ledger.streak, "status": day_status}
