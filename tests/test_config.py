"""Tests for environment-driven settings and logging setup."""

import logging
from pathlib import Path

import pytest

from daily_tasks.config import load_settings
from daily_tasks.logging_setup import LOG_FILENAME, setup_logging


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "DATA_DIR",
        "STORAGE_KEY",
        "LOG_LEVEL",
        "LOG_DIR",
        "HOST",
        "PORT",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(f"DAILY_TASKS_{name}", raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    """Test the settings used when nothing is configured."""
    settings = load_settings(use_dotenv=False)

    assert settings.data_dir == Path("~/.daily-tasks").expanduser()
    assert settings.log_dir == settings.data_dir / "logs"
    assert settings.storage_key == "tasks"
    assert settings.log_level == "INFO"
    assert (settings.host, settings.port) == ("127.0.0.1", 8000)
    assert settings.cors_origins == ("http://localhost:3000",)


def test_env_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test that DAILY_TASKS_* variables override defaults."""
    clean_env.setenv("DAILY_TASKS_DATA_DIR", str(tmp_path))
    clean_env.setenv("DAILY_TASKS_STORAGE_KEY", "work")
    clean_env.setenv("DAILY_TASKS_LOG_LEVEL", "debug")
    clean_env.setenv("DAILY_TASKS_PORT", "9001")
    clean_env.setenv("DAILY_TASKS_CORS_ORIGINS", "http://a.test, http://b.test")

    settings = load_settings(use_dotenv=False)

    assert settings.data_dir == tmp_path
    assert settings.log_dir == tmp_path / "logs"
    assert settings.storage_key == "work"
    assert settings.log_level == "DEBUG"
    assert settings.port == 9001
    assert settings.cors_origins == ("http://a.test", "http://b.test")


def test_bad_port_falls_back(clean_env: pytest.MonkeyPatch) -> None:
    """Test that a malformed integer keeps the default."""
    clean_env.setenv("DAILY_TASKS_PORT", "eighty")
    assert load_settings(use_dotenv=False).port == 8000


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    """Test that records reach the log file."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path)
        logging.getLogger("daily_tasks.test").debug("hello from the test")
        for h in root.handlers:
            h.flush()

        assert log_file == tmp_path / LOG_FILENAME
        assert "hello from the test" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
