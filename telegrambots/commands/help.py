"""Built-in /help command listing the commands of a registry."""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, List, Optional

from ..logging_config import get_logger
from .base import BotCommand, Sender

if TYPE_CHECKING:
    from ..models import Chat, User
    from .registry import CommandRegistry

logger = get_logger("commands")

HTML_PARSE_MODE = "HTML"


class HelpCommand(BotCommand):
    """Reply with the rendered list of registered commands.

    "/help" lists every command sorted by identifier; "/help <name>"
    shows a single one.

    Args:
        registry: Registry whose commands are listed.
        identifier: Command name, "help" by default.
        description: Text shown for this command itself.
    """

    def __init__(
        self,
        registry: "CommandRegistry",
        identifier: str = "help",
        description: str = "Show available commands",
    ):
        super().__init__(identifier, description)
        self.registry = registry

    def build_help_text(self, name: Optional[str] = None) -> str:
        """Return the HTML reply for "/help" or "/help <name>"."""
        if name:
            command = self.registry.get_registered_command(name.lstrip("/").lower())
            if command is None:
                return f"Unknown command: /{html.escape(name.lstrip('/'))}"
            return command.render_display()

        commands = sorted(
            self.registry.get_registered_commands(), key=lambda c: c.identifier
        )
        if not commands:
            return "No commands available."
        return "\n\n".join(c.render_display() for c in commands)

    def execute(
        self,
        sender: Sender,
        user: Optional["User"],
        chat: "Chat",
        arguments: List[str],
    ) -> None:
        name = arguments[0] if arguments else None
        logger.debug("help_requested", chat_id=chat.id, topic=name)
        sender.send_message(chat.id, self.build_help_text(name), parse_mode=HTML_PARSE_MODE)
