"""Settings loaded from profile.yaml with environment overrides.

profile.yaml (in the workspace root):

    timezone: Europe/Berlin
    ai:
      model: gpt-4o-mini
      base_url: https://openrouter.ai/api/v1
      temperature: 0.7

The API key is only read from the environment (WINTHEDAY_AI_API_KEY,
falling back to OPENAI_API_KEY), never from the profile.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from wintheday.fileio import read_yaml, write_yaml_atomic
from wintheday.workspace import profile_path, workspace_root

logger = logging.getLogger(__name__)

ENV_PREFIX = "WINTHEDAY"

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v.strip()
    return default


def _as_float(raw: Any, default: float) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    ai_api_key: str | None = None
    ai_model: str = DEFAULT_MODEL
    ai_base_url: str | None = None
    ai_temperature: float = DEFAULT_TEMPERATURE

    @property
    def ai_enabled(self) -> bool:
        return bool(self.ai_api_key)


def load_settings(root: Path | None = None) -> Settings:
    """Build Settings from profile.yaml and the environment."""
    if root is None:
        root = workspace_root()
    try:
        profile = read_yaml(profile_path(root))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read profile.yaml, using defaults: %s", e)
        profile = {}

    ai = profile.get("ai") if isinstance(profile.get("ai"), dict) else {}

    return Settings(
        ai_api_key=_first_env(_k("AI_API_KEY"), "OPENAI_API_KEY"),
        ai_model=_first_env(_k("AI_MODEL"), default=str(ai.get("model") or DEFAULT_MODEL)) or DEFAULT_MODEL,
        ai_base_url=_first_env(_k("AI_BASE_URL"), default=ai.get("base_url") or None),
        ai_temperature=_as_float(ai.get("temperature"), DEFAULT_TEMPERATURE),
    )


def init_workspace(root: Path | None = None) -> Path:
    """Create the workspace layout and a default profile.yaml if missing."""
    if root is None:
        root = workspace_root()
    root.mkdir(parents=True, exist_ok=True)
    path = profile_path(root)
    if not path.exists():
        write_yaml_atomic(path, {
            "timezone": "UTC",
            "ai": {"model": DEFAULT_MODEL, "temperature": DEFAULT_TEMPERATURE},
        })
        logger.info("Created default profile at %s", path)
    return root
