"""Tests for settings.yaml / .env configuration."""

from unittest.mock import patch

import pytest

from telegrambots.config import DEFAULT_SESSION_TIMEOUT, Config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_USERNAME", raising=False)
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)


def test_defaults_without_files(tmp_path):
    config = Config(config_dir=tmp_path)
    assert config.settings == {}
    assert config.bot_username is None
    assert config.bot_token == ""
    assert config.allow_commands_with_username is True
    assert config.session_timeout == DEFAULT_SESSION_TIMEOUT
    assert config.logging_level == "INFO"
    assert config.logging_backup_count == 5


def test_settings_yaml(tmp_path):
    (tmp_path / "settings.yaml").write_text(
        "bot_username: mybot\n"
        "allow_commands_with_username: false\n"
        "session_timeout: 60\n"
        "log_dir: /tmp/tb-logs\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  subsystem_levels:\n"
        "    commands: WARNING\n"
    )
    config = Config(config_dir=tmp_path)
    assert config.bot_username == "mybot"
    assert config.allow_commands_with_username is False
    assert config.session_timeout == 60
    assert str(config.log_dir) == "/tmp/tb-logs"
    assert config.logging_level == "DEBUG"
    assert config.logging_subsystem_levels == {"commands": "WARNING"}


def test_env_file_overrides_username(tmp_path):
    (tmp_path / "settings.yaml").write_text("bot_username: fromyaml\n")
    (tmp_path / ".env").write_text(
        "TELEGRAM_BOT_USERNAME=@fromenv\n"
        "TELEGRAM_BOT_TOKEN=123456:secret\n"
    )
    config = Config(config_dir=tmp_path)
    assert config.bot_username == "fromenv"
    assert config.bot_token == "123456:secret"


def test_invalid_session_timeout_falls_back(tmp_path):
    (tmp_path / "settings.yaml").write_text("session_timeout: -5\n")
    assert Config(config_dir=tmp_path).session_timeout == DEFAULT_SESSION_TIMEOUT


def test_session_purge_interval(tmp_path):
    assert Config(config_dir=tmp_path).session_purge_interval is None
    (tmp_path / "settings.yaml").write_text("session_purge_interval: 300\n")
    assert Config(config_dir=tmp_path).session_purge_interval == 300
    (tmp_path / "settings.yaml").write_text("session_purge_interval: 0\n")
    assert Config(config_dir=tmp_path).session_purge_interval is None


def test_validate_logs_bad_purge_interval(tmp_path):
    (tmp_path / "settings.yaml").write_text("bot_username: b\nsession_purge_interval: soon\n")
    config = Config(config_dir=tmp_path)
    with patch("telegrambots.config.logger") as mock_logger:
        config.validate()
    (call,) = mock_logger.error.call_args_list
    assert call.kwargs["key"] == "session_purge_interval"


def test_validate_logs_missing_username(tmp_path):
    config = Config(config_dir=tmp_path)
    with patch("telegrambots.config.logger") as mock_logger:
        config.validate()
    events = [c.args[0] for c in mock_logger.error.call_args_list]
    assert "bot_username_missing" in events


def test_validate_logs_bad_timeout(tmp_path):
    (tmp_path / "settings.yaml").write_text("bot_username: b\nsession_timeout: zero\n")
    config = Config(config_dir=tmp_path)
    with patch("telegrambots.config.logger") as mock_logger:
        config.validate()
    events = [c.args[0] for c in mock_logger.error.call_args_list]
    assert events == ["config_invalid_value"]


def test_get_config_singleton():
    with patch("telegrambots.config._config", None):
        from telegrambots.config import get_config
        assert get_config() is get_config()
