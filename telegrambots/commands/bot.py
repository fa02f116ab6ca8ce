"""Command-aware bot base class.

Routes each incoming update either to the command registry or to the
subclass's handler for everything else. Receiving updates and sending
replies both belong to the transport; this class only decides where an
update goes.

Key classes:
    CommandBot: ABC owning a CommandRegistry for one bot.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Tuple

from ..exceptions import require_not_none
from ..logging_config import get_logger
from .base import COMMAND_INIT_CHARACTER, BotCommand, Sender
from .registry import CommandRegistry, DefaultAction

if TYPE_CHECKING:
    from ..config import Config
    from ..models import Message, Update

logger = get_logger("bot")


class CommandBot(ABC):
    """Bot that dispatches "/commands" through a CommandRegistry.

    Subclasses implement process_non_command_update() for updates that
    are not commands, or that no command (and no default action)
    handled.

    Args:
        sender: Handle passed to commands for replying.
        bot_username: This bot's username, used to strip "@username"
            suffixes from commands sent in group chats.
        allow_commands_with_username: Enable suffix stripping.
    """

    def __init__(
        self,
        sender: Sender,
        bot_username: Optional[str],
        allow_commands_with_username: bool = True,
    ):
        self.sender = require_not_none(sender, "sender", module="commands.bot")
        self.bot_username = bot_username
        self.registry = CommandRegistry(
            allow_commands_with_username, lambda: self.bot_username
        )

    @classmethod
    def from_config(cls, sender: Sender, config: "Config", **kwargs):
        """Build a bot from the username settings in ``config``."""
        return cls(
            sender,
            config.bot_username,
            config.allow_commands_with_username,
            **kwargs,
        )

    # --- Registry delegation ---

    def register(self, command: BotCommand) -> bool:
        return self.registry.register(command)

    def register_all(self, commands: Iterable[BotCommand]) -> Dict[BotCommand, bool]:
        return self.registry.register_all(commands)

    def deregister(self, command: BotCommand) -> bool:
        return self.registry.deregister(command)

    def deregister_all(self, commands: Iterable[BotCommand]) -> Dict[BotCommand, bool]:
        return self.registry.deregister_all(commands)

    def get_registered_commands(self) -> Tuple[BotCommand, ...]:
        return self.registry.get_registered_commands()

    def get_registered_command(self, identifier: str) -> Optional[BotCommand]:
        return self.registry.get_registered_command(identifier)

    def register_default_action(self, action: Optional[DefaultAction]) -> None:
        self.registry.register_default_action(action)

    # --- Update routing ---

    def filter(self, message: "Message") -> bool:
        """Return True to skip command dispatch for a message.

        A filtered update still reaches process_non_command_update().
        """
        return False

    def on_update_received(self, update: "Update") -> None:
        """Route an update to a command or to process_non_command_update()."""
        message = update.message
        if message is not None and message.has_text() and message.text.startswith(
            COMMAND_INIT_CHARACTER
        ):
            if self.filter(message):
                logger.debug(
                    "command_filtered",
                    update_id=update.update_id,
                    chat_id=message.chat_id,
                )
            elif self.registry.execute_command(self.sender, message):
                return
        self.process_non_command_update(update)

    @abstractmethod
    def process_non_command_update(self, update: "Update") -> None:
        """Handle an update that is not a dispatched command."""
        ...
