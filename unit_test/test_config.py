"""Tests for settings loading."""
import os

from backend.app.config import _PROJECT_ROOT, Settings


def test_env_file_lives_under_project_root():
    assert Settings.model_config["env_file"] == os.path.join(_PROJECT_ROOT, "config", ".env")


def test_app_url_alias(monkeypatch):
    monkeypatch.delenv("APP_URL", raising=False)
    monkeypatch.setenv("NEXT_PUBLIC_APP_URL", "https://chat.example.com")
    assert Settings(_env_file=None).app_url == "https://chat.example.com"
