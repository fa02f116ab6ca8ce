"""Command framework for Telegram bots.

Provides the BotCommand ABC, the thread-safe CommandRegistry that maps
identifiers to commands, the CommandBot update router, and a built-in
HelpCommand.
"""

from .base import (
    COMMAND_INIT_CHARACTER,
    COMMAND_MAX_LENGTH,
    COMMAND_PARAMETER_SEPARATOR_PATTERN,
    BotCommand,
    Sender,
)
from .bot import CommandBot
from .help import HelpCommand
from .registry import CommandRegistry, DefaultAction

__all__ = [
    "BotCommand",
    "CommandBot",
    "CommandRegistry",
    "DefaultAction",
    "HelpCommand",
    "Sender",
    "COMMAND_INIT_CHARACTER",
    "COMMAND_MAX_LENGTH",
    "COMMAND_PARAMETER_SEPARATOR_PATTERN",
]
