"""AI task suggestions and motivational lines.

Both calls go to an OpenAI-compatible chat endpoint. Neither ever raises:
missing configuration or any failure resolves to fixed fallback text so
the UI never waits on or shows an error for this path. No retries.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from openai import AsyncOpenAI

from wintheday.config import Settings, load_settings
from wintheday.models import TASKS_PER_DAY

logger = logging.getLogger(__name__)

UNCONFIGURED_TASKS = ["Define your goal", "Break it down", "Execute step 1", "Review progress", "Plan tomorrow"]
UNCONFIGURED_QUOTE = "Action is the foundational key to all success."

ERROR_TASKS = ["Drink 1 gallon water", "Read 10 pages", "45 min workout", "Clear inbox", "Plan tomorrow"]
ERROR_QUOTE = "Discipline equals freedom."

PAD_TASK = "Review goals"
DEFAULT_QUOTE = "Dominate the day."

UNCONFIGURED_MOTIVATION = "Keep pushing forward."
EMPTY_MOTIVATION = "Go win."
ERROR_MOTIVATION = "Focus on the execution."

TASKS_PROMPT = """The user wants to 'Win the Day' based on this goal: "{goal}".
Generate 5 specific, high-impact, actionable tasks that they can complete today to move the needle.
Also provide a short motivational quote.
Keep tasks concise (under 10 words).
Reply with a JSON object only: {{"tasks": [5 strings], "motivationalQuote": string}}."""

MOTIVATION_PROMPT = """The user is using a 'Win the Day' tracker.
Current Streak: {streak} days.
Current Status for today: {status}.
Give me a very short, aggressive, high-performance coaching sentence to keep them moving.
Max 20 words."""


@dataclass
class TaskSuggestion:
    tasks: list[str] = field(default_factory=list)
    quote: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"tasks": self.tasks, "quote": self.quote}


def _make_client(settings: Settings) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=settings.ai_api_key,
        base_url=settings.ai_base_url or None,
        max_retries=0,
    )


def _parse_suggestion(text: str) -> TaskSuggestion:
    data = json.loads(text or "{}")
    if not isinstance(data, dict):
        raise ValueError("suggestion reply is not a JSON object")
    raw_tasks = data.get("tasks")
    tasks = [str(t) for t in raw_tasks][:TASKS_PER_DAY] if isinstance(raw_tasks, list) else []
    while len(tasks) < TASKS_PER_DAY:
        tasks.append(PAD_TASK)
    quote = str(data.get("motivationalQuote") or DEFAULT_QUOTE)
    return TaskSuggestion(tasks=tasks, quote=quote)


async def generate_tasks(
    goal: str,
    settings: Settings | None = None,
    client: Any = None,
) -> TaskSuggestion:
    """Five task texts plus a quote for *goal*."""
    if settings is None:
        settings = load_settings()
    if client is None and not settings.ai_enabled:
        logger.warning("No AI API key configured; using default task suggestions")
        return TaskSuggestion(tasks=list(UNCONFIGURED_TASKS), quote=UNCONFIGURED_QUOTE)

    try:
        if client is None:
            client = _make_client(settings)
        response = await client.chat.completions.create(
            model=settings.ai_model,
            messages=[{"role": "user", "content": TASKS_PROMPT.format(goal=goal)}],
            response_format={"type": "json_object"},
            temperature=settings.ai_temperature,
        )
        return _parse_suggestion(response.choices[0].message.content)
    except Exception as e:
        logger.warning("Task suggestion failed: %s", e)
        return TaskSuggestion(tasks=list(ERROR_TASKS), quote=ERROR_QUOTE)


async def get_motivation(
    streak: int,
    status: str,
    settings: Settings | None = None,
    client: Any = None,
) -> str:
    """One short coaching line for the current streak and status."""
    if settings is None:
        settings = load_settings()
    if client is None and not settings.ai_enabled:
        return UNCONFIGURED_MOTIVATION

    try:
        if client is None:
            client = _make_client(settings)
        response = await client.chat.completions.create(
            model=settings.ai_model,
            messages=[{"role": "user", "content": MOTIVATION_PROMPT.format(streak=streak, status=status)}],
        )
        text = (response.choices[0].message.content or "").strip()
        return text or EMPTY_MOTIVATION
    except Exception as e:
        logger.warning("Motivation request failed: %s", e)
        return ERROR_MOTIVATION
