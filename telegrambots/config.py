"""Configuration management for telegrambots.

Loads YAML settings (settings.yaml) and environment variables (.env)
into a Config object. Property getters provide typed access with
sensible defaults for the bot identity, command parsing, sessions and
logging.

Key classes:
    Config: Central configuration manager.

Key functions:
    get_config: Singleton accessor for the global Config instance.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .logging_config import get_logger

logger = get_logger("bot")

DEFAULT_SESSION_TIMEOUT = 1800  # seconds


class Config:
    """Central configuration manager for telegrambots.

    Loads settings.yaml and .env from the config directory. Read-only
    after __init__, so safe to share between threads.

    Args:
        config_dir: Path to the config directory. Defaults to
            ``<repo_root>/config/``.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path(__file__).parent.parent / "config"
        self.config_dir = Path(config_dir)

        # Load environment variables
        env_file = self.config_dir / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        self.settings = self._load_yaml("settings.yaml")

    def _load_yaml(self, filename: str) -> dict:
        """Load a YAML configuration file."""
        filepath = self.config_dir / filename
        if filepath.exists():
            with open(filepath, "r") as f:
                return yaml.safe_load(f) or {}
        return {}

    def validate(self):
        """Validate critical settings at startup.

        Logs warnings/errors but does not raise; the code that needs a
        missing value raises when it actually uses it.
        """
        if self.allow_commands_with_username and not self.bot_username:
            logger.error(
                "bot_username_missing",
                msg="Commands addressed as /cmd@bot will fail to dispatch",
            )
        if not self.bot_token:
            logger.warning("bot_token_missing")

        for key in ("session_timeout", "session_purge_interval"):
            value = self.settings.get(key)
            if value is not None and (not isinstance(value, int) or value < 1):
                logger.error(
                    "config_invalid_value",
                    key=key,
                    value=value,
                    valid=">= 1",
                )

    @property
    def bot_username(self) -> Optional[str]:
        """Bot username without "@". Env var TELEGRAM_BOT_USERNAME takes precedence."""
        username = os.environ.get("TELEGRAM_BOT_USERNAME") or self.settings.get("bot_username")
        if username:
            return str(username).lstrip("@")
        return None

    @property
    def bot_token(self) -> str:
        """Bot API token, read only from the environment."""
        return os.environ.get("TELEGRAM_BOT_TOKEN", "")

    @property
    def allow_commands_with_username(self) -> bool:
        """Accept "/cmd@botname" addressed commands (default True)."""
        return bool(self.settings.get("allow_commands_with_username", True))

    @property
    def session_timeout(self) -> int:
        """Idle seconds before a chat session expires (default 30 minutes)."""
        value = self.settings.get("session_timeout", DEFAULT_SESSION_TIMEOUT)
        if not isinstance(value, int) or value < 1:
            return DEFAULT_SESSION_TIMEOUT
        return value

    @property
    def session_purge_interval(self) -> Optional[int]:
        """Seconds between automatic sweeps of expired sessions.

        None (unset or invalid) means the session timeout is used.
        """
        value = self.settings.get("session_purge_interval")
        if not isinstance(value, int) or value < 1:
            return None
        return value

    @property
    def log_dir(self) -> Path:
        """Get log directory path."""
        configured = self.settings.get("log_dir")
        if configured:
            return Path(configured).expanduser()
        return Path(__file__).parent.parent / "logs"

    @property
    def logging_level(self) -> str:
        """Global log level (default INFO). Controls console and combined file."""
        log_config = self.settings.get("logging", {})
        return log_config.get("level", "INFO")

    @property
    def logging_subsystem_levels(self) -> dict:
        """Per-subsystem log level overrides. E.g. {"commands": "DEBUG"}."""
        log_config = self.settings.get("logging", {})
        return log_config.get("subsystem_levels", {})

    @property
    def logging_max_file_size_mb(self) -> int:
        """Max size per log file in MB before rotation (default 10)."""
        log_config = self.settings.get("logging", {})
        return log_config.get("max_file_size_mb", 10)

    @property
    def logging_backup_count(self) -> int:
        """Number of rotated log files to keep (default 5)."""
        log_config = self.settings.get("logging", {})
        return log_config.get("backup_count", 5)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
