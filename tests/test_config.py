"""
Configuration Tests
"""
from pathlib import Path

import pytest

from hyperindex_mcp.config import DEFAULT_INIT_COMMAND, DEFAULT_SUCCESS_MARKERS, Settings

ENV_VARS = [
    "MCP_LOG_LEVEL",
    "HYPERINDEX_SERVER_NAME",
    "HYPERINDEX_INIT_COMMAND",
    "HYPERINDEX_INIT_TIMEOUT",
    "HYPERINDEX_FALLBACK_DELAY",
    "HYPERINDEX_FALLBACK_KEYSTROKES",
    "HYPERINDEX_SUCCESS_MARKERS",
    "HYPERINDEX_HOME",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env(dotenv=False)
    assert settings.log_level == "INFO"
    assert settings.init_command == DEFAULT_INIT_COMMAND
    assert settings.init_timeout == 300.0
    assert settings.success_markers == DEFAULT_SUCCESS_MARKERS
    assert settings.resolved_home == Path.home()


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("MCP_LOG_LEVEL", "debug")
    monkeypatch.setenv("HYPERINDEX_INIT_COMMAND", "./init.sh")
    monkeypatch.setenv("HYPERINDEX_INIT_TIMEOUT", "12.5")
    monkeypatch.setenv("HYPERINDEX_FALLBACK_KEYSTROKES", "4")
    monkeypatch.setenv("HYPERINDEX_SUCCESS_MARKERS", "Done, All good ,")
    monkeypatch.setenv("HYPERINDEX_HOME", str(tmp_path))

    settings = Settings.from_env(dotenv=False)
    assert settings.log_level == "DEBUG"
    assert settings.init_command == "./init.sh"
    assert settings.init_timeout == 12.5
    assert settings.fallback_keystrokes == 4
    assert settings.success_markers == ("Done", "All good")
    assert settings.resolved_home == tmp_path


def test_empty_markers_disable_check(monkeypatch):
    monkeypatch.setenv("HYPERINDEX_SUCCESS_MARKERS", "")
    assert Settings.from_env(dotenv=False).success_markers == ()


def test_bad_number(monkeypatch):
    monkeypatch.setenv("HYPERINDEX_INIT_TIMEOUT", "five minutes")
    with pytest.raises(ValueError, match="HYPERINDEX_INIT_TIMEOUT"):
        Settings.from_env(dotenv=False)
