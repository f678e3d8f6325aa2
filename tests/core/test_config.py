# tests/core/test_config.py
import json
import logging

import pytest

from brandpawa.core.config import Settings
from brandpawa.core.logging_config import CustomJsonFormatter, setup_logging


# --- Settings ---

def test_settings_defaults(monkeypatch):
    for name in ("BRANDPAWA_POINTS_PER_TASK", "BRANDPAWA_STREAK_GRACE_DAYS", "BRANDPAWA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.points_per_task == 10
    assert settings.default_reward_points == 100
    assert settings.streak_grace_days == 1
    assert settings.diagnostics_path is None


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("BRANDPAWA_POINTS_PER_TASK", "25")
    monkeypatch.setenv("BRANDPAWA_DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("BRANDPAWA_DATABASE_ECHO", "true")
    settings = Settings()
    assert settings.points_per_task == 25
    assert settings.database_url == "sqlite:///:memory:"
    assert settings.database_echo is True


def test_settings_reject_bad_values(monkeypatch):
    monkeypatch.setenv("BRANDPAWA_STREAK_GRACE_DAYS", "soon")
    with pytest.raises(ValueError):
        Settings()


# --- Logging ---

def test_json_formatter_adds_fields():
    formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
    record = logging.LogRecord("brandpawa.test", logging.WARNING, __file__, 42, "streak lapsed", None, None)
    payload = json.loads(formatter.format(record))
    assert payload["message"] == "streak lapsed"
    assert payload["level"] == "WARNING"
    assert payload["lineno"] == 42
    assert payload["module"] == "test_config"
    assert "timestamp" in payload


def test_setup_logging_installs_one_handler():
    root = logging.getLogger()
    original_handlers, original_level = list(root.handlers), root.level
    try:
        setup_logging("debug")
        setup_logging("warning")
        json_handlers = [h for h in root.handlers if isinstance(h.formatter, CustomJsonFormatter)]
        assert len(json_handlers) == 1
        assert root.level == logging.WARNING
    finally:
        root.handlers = original_handlers
        root.setLevel(original_level)
