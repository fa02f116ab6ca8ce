"""Command registry: maps identifiers to commands and dispatches messages.

The registry is shared by every update-processing thread of a bot.
Writes (register/deregister) go through an internal lock so that
"insert if absent" and "remove" are atomic per identifier. The full
snapshot is copied under the same lock; single lookups during dispatch
do not lock. The default action is a single attribute, so a reader sees
either the old or the new handler.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Tuple

from ..exceptions import ConfigurationError, MissingReferenceError, require_not_none
from ..logging_config import get_logger
from .base import (
    COMMAND_INIT_CHARACTER,
    COMMAND_PARAMETER_SEPARATOR_PATTERN,
    BotCommand,
    Sender,
)

if TYPE_CHECKING:
    from ..models import Message

logger = get_logger("commands")

_MODULE = "commands.registry"

# Type alias for the fallback handler: (sender, message) -> None
DefaultAction = Callable[[Sender, "Message"], None]


class CommandRegistry:
    """Registry of bot commands with dispatch and a default fallback.

    Args:
        allow_commands_with_username: Accept "/cmd@botname" and strip the
            suffix when it names this bot.
        bot_username_supplier: Zero-argument callable returning the bot's
            username. Only consulted when allow_commands_with_username
            is set.

    Raises:
        MissingReferenceError: bot_username_supplier is None.
    """

    def __init__(
        self,
        allow_commands_with_username: bool,
        bot_username_supplier: Callable[[], Optional[str]],
    ):
        self._allow_commands_with_username = allow_commands_with_username
        self._bot_username_supplier = require_not_none(
            bot_username_supplier, "bot_username_supplier", module=_MODULE
        )
        self._commands: Dict[str, BotCommand] = {}
        self._lock = threading.Lock()
        self._default_action: Optional[DefaultAction] = None

    @property
    def allow_commands_with_username(self) -> bool:
        return self._allow_commands_with_username

    def register_default_action(self, action: Optional[DefaultAction]) -> None:
        """Set the handler run when no command matches. None clears it."""
        self._default_action = action

    def register(self, command: BotCommand) -> bool:
        """Register a command unless its identifier is already taken.

        Returns:
            True if stored, False if another command already owns the
            identifier (the existing entry is kept).
        """
        require_not_none(command, "command", module=_MODULE)
        identifier = command.identifier
        with self._lock:
            if identifier in self._commands:
                registered = False
            else:
                self._commands[identifier] = command
                registered = True
        if registered:
            logger.debug("command_registered", command=identifier)
        else:
            logger.warning("command_already_registered", command=identifier)
        return registered

    def register_all(self, commands: Iterable[BotCommand]) -> Dict[BotCommand, bool]:
        """Register each command, returning {command: registered}."""
        return self._apply_all(self.register, commands)

    def deregister(self, command: BotCommand) -> bool:
        """Remove the command registered under ``command.identifier``.

        Returns:
            True if an entry was removed.
        """
        require_not_none(command, "command", module=_MODULE)
        with self._lock:
            removed = self._commands.pop(command.identifier, None) is not None
        if removed:
            logger.debug("command_deregistered", command=command.identifier)
        return removed

    def deregister_all(self, commands: Iterable[BotCommand]) -> Dict[BotCommand, bool]:
        """Deregister each command, returning {command: removed}."""
        return self._apply_all(self.deregister, commands)

    def _apply_all(
        self,
        operation: Callable[[BotCommand], bool],
        commands: Iterable[BotCommand],
    ) -> Dict[BotCommand, bool]:
        """Apply operation to every element, even past a None element.

        A None element does not stop the loop. Once every element has
        been processed the first such failure is re-raised with the
        partial result map attached as ``results``.
        """
        require_not_none(commands, "commands", module=_MODULE)
        results: Dict[BotCommand, bool] = {}
        failure: Optional[MissingReferenceError] = None
        for index, command in enumerate(commands):
            try:
                results[command] = operation(command)
            except MissingReferenceError as e:
                logger.warning("command_batch_null_element", index=index)
                if failure is None:
                    e.context["index"] = index
                    failure = e
        if failure is not None:
            failure.results = results
            raise failure
        return results

    def get_registered_commands(self) -> Tuple[BotCommand, ...]:
        """Snapshot of every registered command.

        The tuple is immutable and does not follow later registrations.
        """
        with self._lock:
            return tuple(self._commands.values())

    def get_registered_command(self, identifier: str) -> Optional[BotCommand]:
        """Look up a command by its normalized identifier."""
        return self._commands.get(identifier)

    def execute_command(self, sender: Sender, message: "Message") -> bool:
        """Dispatch a message to the matching command or the default action.

        Args:
            sender: Handle passed through to the command.
            message: Incoming message.

        Returns:
            True if a command or the default action ran, False if the
            message is not a command or nothing handled it.

        Raises:
            MissingReferenceError: message is None.
            ConfigurationError: username suffixes are enabled but the
                supplier returns no username.
        """
        require_not_none(message, "message", module=_MODULE)
        if not message.has_text():
            return False
        text = message.text
        if not text.startswith(COMMAND_INIT_CHARACTER):
            return False

        tokens = self._split(text[len(COMMAND_INIT_CHARACTER):])
        command_name = self._remove_username_from_command(tokens[0])
        arguments = tokens[1:]

        command = self._commands.get(command_name)
        if command is not None:
            logger.debug(
                "command_dispatched",
                command=command_name,
                chat_id=message.chat_id,
                args=len(arguments),
            )
            command.dispatch(sender, message, arguments)
            return True

        default_action = self._default_action
        if default_action is not None:
            logger.debug(
                "default_action_dispatched",
                command=command_name,
                chat_id=message.chat_id,
            )
            default_action(sender, message)
            return True

        logger.debug("command_not_found", command=command_name, chat_id=message.chat_id)
        return False

    @staticmethod
    def _split(command_text: str) -> List[str]:
        """Split on whitespace runs, dropping trailing empty tokens.

        A leading whitespace run still yields an empty first token.
        """
        tokens = COMMAND_PARAMETER_SEPARATOR_PATTERN.split(command_text)
        while len(tokens) > 1 and tokens[-1] == "":
            tokens.pop()
        return tokens

    def _remove_username_from_command(self, command: str) -> str:
        """Strip "@<bot username>" from a command when enabled.

        The supplier is checked whenever the feature is on, even if the
        command has no "@" suffix.
        """
        if not self._allow_commands_with_username:
            return command

        bot_username = self._bot_username_supplier()
        if bot_username is None:
            raise ConfigurationError(
                "Bot username must not be None",
                setting_name="bot_username",
                module=_MODULE,
            )
        at_index = command.find("@")
        if at_index > 0:
            username = command[at_index + 1:]
            if username.lower() == bot_username.lower():
                return command[:at_index]
        return command
