"""Base class for bot commands.

A command is a named, described, executable action that users invoke
with the "/" prefix (e.g. "/start"). Concrete commands subclass
BotCommand and implement execute(); CommandRegistry looks them up by
their normalized identifier.

Key classes:
    Sender: Protocol for the handle commands use to reply to a chat.
    BotCommand: ABC that every command must extend.

Constants:
    COMMAND_INIT_CHARACTER: The character that starts a command.
    COMMAND_PARAMETER_SEPARATOR_PATTERN: Splits a command from its
        arguments (runs of ASCII whitespace).
    COMMAND_MAX_LENGTH: Maximum identifier length, prefix included.
"""

from __future__ import annotations

import html
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List, Optional, Protocol

from ..exceptions import InvalidArgumentError, require_not_none

if TYPE_CHECKING:
    from ..models import Chat, Message, User

COMMAND_INIT_CHARACTER = "/"
# ASCII whitespace only: "\u00a0" and other Unicode spaces stay inside a token.
COMMAND_PARAMETER_SEPARATOR_PATTERN = re.compile(r"\s+", re.ASCII)
COMMAND_MAX_LENGTH = 32

_MODULE = "commands.base"


class Sender(Protocol):
    """Capability to send messages back to a chat.

    Implemented by the HTTP client that talks to the Bot API.
    """

    def send_message(
        self, chat_id: int, text: str, parse_mode: Optional[str] = None
    ) -> Any:
        ...


class BotCommand(ABC):
    """A command that can be executed.

    The identifier is normalized once in __init__ (one leading "/"
    removed, lowercased) and never changes afterwards, so instances
    are safe to share between update-processing threads.

    Args:
        identifier: Command name, with or without the leading "/".
        description: Human-readable text shown in help listings.

    Raises:
        MissingReferenceError: identifier or description is None.
        InvalidArgumentError: identifier is empty, only "/", or longer
            than COMMAND_MAX_LENGTH including the prefix.
    """

    def __init__(self, identifier: str, description: str):
        require_not_none(identifier, "identifier", module=_MODULE)
        require_not_none(description, "description", module=_MODULE)

        if not identifier:
            raise InvalidArgumentError(
                "identifier cannot be empty", module=_MODULE
            )
        if identifier.startswith(COMMAND_INIT_CHARACTER):
            identifier = identifier[len(COMMAND_INIT_CHARACTER):]
        if not identifier:
            raise InvalidArgumentError(
                "identifier cannot be empty after removing prefix", module=_MODULE
            )
        if len(identifier) + len(COMMAND_INIT_CHARACTER) > COMMAND_MAX_LENGTH:
            raise InvalidArgumentError(
                f"identifier cannot be longer than {COMMAND_MAX_LENGTH} "
                f"(including {COMMAND_INIT_CHARACTER})",
                module=_MODULE,
                length=len(identifier) + len(COMMAND_INIT_CHARACTER),
            )

        # str.lower() does not depend on the process locale.
        self._identifier = identifier.lower()
        self._description = description

    @property
    def identifier(self) -> str:
        """Normalized identifier, without the leading "/"."""
        return self._identifier

    @property
    def description(self) -> str:
        return self._description

    def render_display(self) -> str:
        """Render the command as HTML for a help listing.

        Identifier and description are HTML-escaped, quotes included.
        """
        return (
            f"<b>{COMMAND_INIT_CHARACTER}{html.escape(self._identifier)}</b>\n"
            f"{html.escape(self._description)}"
        )

    def __str__(self) -> str:
        return self.render_display()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(identifier={self._identifier!r})"

    def dispatch(self, sender: Sender, message: "Message", arguments: List[str]) -> None:
        """Unpack the message and execute the command.

        Subclasses override execute(), not this method.

        Raises:
            MissingReferenceError: Any parameter is None.
        """
        require_not_none(sender, "sender", module=_MODULE)
        require_not_none(message, "message", module=_MODULE)
        require_not_none(arguments, "arguments", module=_MODULE)
        self.execute(sender, message.from_user, message.chat, arguments)

    @abstractmethod
    def execute(
        self,
        sender: Sender,
        user: Optional["User"],
        chat: "Chat",
        arguments: List[str],
    ) -> None:
        """Run the command.

        Args:
            sender: Handle for replying to the chat.
            user: Who sent the command (None for channel posts).
            chat: Where the command was sent.
            arguments: Whitespace-separated tokens after the command.
        """
        ...
