"""Tests for typestorm.core.config – settings and environment overrides."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from typestorm.core.config import DEFAULT_PHRASES_PATH, Settings, load_settings


class TestSettingsDefaults:
    def test_values(self):
        s = Settings()
        assert s.phrases_path == DEFAULT_PHRASES_PATH
        assert s.error_window_ms == 300
        assert s.tick_interval_ms == 500
        assert s.chars_per_word == 5
        assert s.log_level == "INFO"

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().log_level = "DEBUG"  # type: ignore[misc]

    def test_default_phrase_file_exists(self):
        assert DEFAULT_PHRASES_PATH.exists()


class TestLoadSettings:
    def test_empty_environment(self):
        assert load_settings({}) == Settings()

    def test_phrases_override(self, tmp_path: Path):
        target = tmp_path / "mine.yaml"
        s = load_settings({"TYPESTORM_PHRASES": str(target)})
        assert s.phrases_path == target

    def test_blank_phrases_ignored(self):
        s = load_settings({"TYPESTORM_PHRASES": "   "})
        assert s.phrases_path == DEFAULT_PHRASES_PATH

    def test_log_level_case_insensitive(self):
        assert load_settings({"TYPESTORM_LOG_LEVEL": "debug"}).log_level == "DEBUG"

    def test_unknown_log_level(self):
        assert load_settings({"TYPESTORM_LOG_LEVEL": "chatty"}).log_level == "INFO"

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("TYPESTORM_LOG_LEVEL", "WARNING")
        assert load_settings().log_level == "WARNING"
