"""Logging for telegrambots.

Every module logs through ``get_logger(<subsystem>)``, which hands out
structlog loggers named "telegrambots.<subsystem>". Nothing is configured
at import time: until the application calls setup_logging(), events go
wherever the application's own stdlib/structlog setup sends them.

setup_logging() only touches the "telegrambots" stdlib logger tree; the
root logger and other libraries' loggers are left alone. It does set the
process-wide structlog configuration, which routes structlog events to
stdlib logging. A bot process typically calls it once at startup::

    from telegrambots.config import get_config
    from telegrambots.logging_config import setup_logging

    setup_logging(get_config(), console=True)

With a config, events are also written to rotating files in
``config.log_dir``: telegrambots.log (everything) plus one file per
subsystem (bot.log, commands.log, sessions.log).
"""

import logging
import logging.handlers
import re
import sys
from typing import Any, Dict, List

import structlog

from .exceptions import InvalidArgumentError

LOGGER_NAME = "telegrambots"

# One stdlib logger (and one log file) per entry.
SUBSYSTEMS = ("bot", "commands", "sessions")

# Telegram bot tokens: "<bot id>:<35 char secret>", also inside API URLs.
_BOT_TOKEN_PATTERN = re.compile(r"\d{6,12}:[A-Za-z0-9_-]{35}")

_REDACTED = "***REDACTED***"


def get_logger(subsystem: str):
    """Return the structlog logger for one telegrambots subsystem.

    Raises:
        InvalidArgumentError: subsystem is not in SUBSYSTEMS.
    """
    if subsystem not in SUBSYSTEMS:
        raise InvalidArgumentError(
            f"Unknown logging subsystem: {subsystem}",
            module="logging_config",
            subsystem=subsystem,
        )
    return structlog.get_logger(f"{LOGGER_NAME}.{subsystem}")


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        return _BOT_TOKEN_PATTERN.sub(_REDACTED, value)
    if isinstance(value, dict):
        return {k: _redact(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return type(value)(_redact(v) for v in value)
    return value


def redact_tokens(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """structlog processor replacing bot tokens in every event value.

    Containers are walked recursively, so a token nested in a dict of
    request parameters is caught as well.
    """
    for key, value in event_dict.items():
        event_dict[key] = _redact(value)
    return event_dict


def _level(name: str, default: int) -> int:
    level = logging.getLevelName(name.upper()) if name else default
    return level if isinstance(level, int) else default


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _shared_processors() -> List[Any]:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_tokens,
    ]


def setup_logging(config=None, *, console: bool = False) -> None:
    """Route telegrambots events to stdlib handlers through structlog.

    Safe to call again (e.g. after reloading the config): handlers
    installed by a previous call are closed and replaced.

    Args:
        config: Optional Config. Supplies levels and, through log_dir,
            turns on the rotating log files. Without one everything is
            logged at INFO and no file is opened.
        console: Also print events to stderr. The "telegrambots" logger
            then stops propagating to the root logger so that events are
            not printed twice.

    Raises:
        OSError: The log directory cannot be created.
    """
    if config is not None:
        level = _level(config.logging_level, logging.INFO)
        subsystem_levels = config.logging_subsystem_levels
        log_dir = config.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
    else:
        level = logging.INFO
        subsystem_levels = {}
        log_dir = None

    foreign_pre_chain = _shared_processors()
    file_formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=foreign_pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    )

    package_logger = logging.getLogger(LOGGER_NAME)
    _reset(package_logger)
    package_logger.setLevel(logging.DEBUG)  # handlers filter by level
    package_logger.propagate = not console

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=foreign_pre_chain,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.dev.ConsoleRenderer(),
                ],
            )
        )
        package_logger.addHandler(console_handler)

    if log_dir is not None:
        max_bytes = config.logging_max_file_size_mb * 1024 * 1024
        backup_count = config.logging_backup_count

        def _file_handler(filename: str, handler_level: int) -> logging.Handler:
            handler = logging.handlers.RotatingFileHandler(
                log_dir / filename,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            handler.setLevel(handler_level)
            handler.setFormatter(file_formatter)
            return handler

        package_logger.addHandler(_file_handler(f"{LOGGER_NAME}.log", level))

    for subsystem in SUBSYSTEMS:
        sub_logger = logging.getLogger(f"{LOGGER_NAME}.{subsystem}")
        _reset(sub_logger)
        sub_level = _level(subsystem_levels.get(subsystem, ""), level)
        sub_logger.setLevel(sub_level)
        sub_logger.propagate = True
        if log_dir is not None:
            sub_logger.addHandler(_file_handler(f"{subsystem}.log", sub_level))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=config is not None,
    )
