"""Tests for wintheday/config.py and wintheday/workspace.py."""

from zoneinfo import ZoneInfo

import yaml

from wintheday.config import DEFAULT_MODEL, init_workspace, load_settings
from wintheday.workspace import get_user_timezone, today_str, workspace_root


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()


def test_load_settings_from_profile(workspace):
    settings = load_settings(workspace)
    assert settings.ai_model == "test-model"
    assert settings.ai_temperature == 0.5
    assert settings.ai_api_key is None
    assert not settings.ai_enabled


def test_env_overrides_profile(workspace, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-fallback")
    monkeypatch.setenv("WINTHEDAY_AI_MODEL", "other-model")
    monkeypatch.setenv("WINTHEDAY_AI_BASE_URL", "http://localhost:8080/v1")
    settings = load_settings(workspace)
    assert settings.ai_api_key == "sk-fallback"
    assert settings.ai_model == "other-model"
    assert settings.ai_base_url == "http://localhost:8080/v1"
    assert settings.ai_enabled

    monkeypatch.setenv("WINTHEDAY_AI_API_KEY", "sk-primary")
    assert load_settings(workspace).ai_api_key == "sk-primary"


def test_blank_env_is_ignored(workspace, monkeypatch):
    monkeypatch.setenv("WINTHEDAY_AI_API_KEY", "   ")
    assert load_settings(workspace).ai_api_key is None


def test_bad_temperature_uses_default(workspace):
    (workspace / "profile.yaml").write_text("ai:\n  temperature: hot\n", encoding="utf-8")
    settings = load_settings(workspace)
    assert settings.ai_temperature == 0.7
    assert settings.ai_model == DEFAULT_MODEL


def test_init_workspace_writes_default_profile(tmp_path):
    root = init_workspace(tmp_path / "fresh")
    profile = yaml.safe_load((root / "profile.yaml").read_text(encoding="utf-8"))
    assert profile["timezone"] == "UTC"
    assert profile["ai"]["model"] == DEFAULT_MODEL


def test_init_workspace_keeps_existing_profile(workspace):
    before = (workspace / "profile.yaml").read_text(encoding="utf-8")
    init_workspace(workspace)
    assert (workspace / "profile.yaml").read_text(encoding="utf-8") == before


def test_timezone_from_profile(workspace):
    (workspace / "profile.yaml").write_text("timezone: Asia/Tokyo\n", encoding="utf-8")
    assert get_user_timezone(workspace) == ZoneInfo("Asia/Tokyo")


def test_unknown_timezone_falls_back_to_utc(workspace):
    (workspace / "profile.yaml").write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    assert get_user_timezone(workspace) == ZoneInfo("UTC")


def test_missing_profile_uses_utc(tmp_path):
    assert get_user_timezone(tmp_path) == ZoneInfo("UTC")


def test_today_str_format(workspace):
    today = today_str(workspace)
    assert len(today) == 10
    assert today[4] == "-" and today[7] == "-"
