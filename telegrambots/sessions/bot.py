"""Session-aware bot base class.

Attaches the chat's session to every update before handing it to the
subclass. Updates that carry no message (neither directly nor through a
callback query) are passed on with no session.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from ..exceptions import require_not_none
from ..logging_config import get_logger
from .session import ChatIdConverter, ChatSession, SessionManager

if TYPE_CHECKING:
    from ..config import Config
    from ..models import Message, Update

logger = get_logger("sessions")


class SessionBot(ABC):
    """Bot that looks up or creates a session per chat.

    Args:
        session_manager: Store to use. Defaults to a new SessionManager
            built from ``timeout``, ``converter`` and ``purge_interval``.
        timeout: Idle seconds before a session expires.
        converter: Chat id to session id mapping.
        purge_interval: Seconds between sweeps of expired sessions.
    """

    def __init__(
        self,
        session_manager: Optional[SessionManager] = None,
        *,
        timeout: Optional[int] = None,
        converter: Optional[ChatIdConverter] = None,
        purge_interval: Optional[int] = None,
    ):
        if session_manager is None:
            kwargs = {"converter": converter, "purge_interval": purge_interval}
            if timeout is not None:
                kwargs["timeout"] = timeout
            session_manager = SessionManager(**kwargs)
        self.session_manager = session_manager

    @classmethod
    def from_config(cls, config: "Config", **kwargs):
        """Build a bot whose sessions follow the session settings in ``config``."""
        return cls(
            timeout=config.session_timeout,
            purge_interval=config.session_purge_interval,
            **kwargs,
        )

    def on_update_received(self, update: "Update") -> None:
        """Resolve the update's chat session and call on_session_update()."""
        if update.has_message():
            message = update.message
        elif update.has_callback_query() and update.callback_query.message is not None:
            message = update.callback_query.message
        else:
            logger.debug("update_without_chat", update_id=update.update_id)
            self.on_session_update(update, None)
            return

        session = self.get_session(message)
        self.on_session_update(update, session)

    def get_session(self, message: "Message") -> ChatSession:
        """Return the session for the message's chat, starting one if needed.

        Raises:
            MissingReferenceError: message is None.
        """
        require_not_none(message, "message", module="sessions.bot")
        username = message.from_user.username if message.from_user else None
        session = self.session_manager.get_or_start(message.chat_id, username)
        session.touch()
        return session

    @abstractmethod
    def on_session_update(self, update: "Update", session: Optional[ChatSession]) -> None:
        """Handle an update together with its chat session (None if no chat)."""
        ...
