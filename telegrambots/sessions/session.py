"""Per-chat sessions and their in-memory store.

A session is keyed by the chat it belongs to and expires after a period
of inactivity. SessionManager is shared by every update-processing
thread, so its store is guarded by a lock.

Key classes:
    ChatSession: State attached to one chat.
    ChatIdConverter: Maps chat ids to session ids.
    SessionManager: Thread-safe store creating and expiring sessions.
"""

import threading
import time
from typing import Any, Dict, Optional

from ..config import DEFAULT_SESSION_TIMEOUT
from ..exceptions import UnknownSessionError
from ..logging_config import get_logger

logger = get_logger("sessions")


class ChatIdConverter:
    """Derive a session id from a chat id.

    Subclass to partition sessions differently (e.g. per user).
    """

    def to_session_id(self, chat_id: int) -> str:
        return str(chat_id)


class ChatSession:
    """State attached to a single chat.

    Args:
        session_id: Id assigned by the ChatIdConverter.
        chat_id: Telegram chat id.
        username: Username of the user who started the session, if known.
        timeout: Idle seconds before the session expires.
    """

    def __init__(
        self,
        session_id: str,
        chat_id: int,
        username: Optional[str] = None,
        timeout: int = DEFAULT_SESSION_TIMEOUT,
    ):
        self.id = session_id
        self.chat_id = chat_id
        self.username = username
        self.timeout = timeout
        self.start_timestamp = time.time()
        self.last_access_time = self.start_timestamp
        self.stopped = False
        self._attributes: Dict[str, Any] = {}

    def touch(self) -> None:
        """Mark the session as used now."""
        self.last_access_time = time.time()

    def stop(self) -> None:
        self.stopped = True

    def is_expired(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = time.time()
        return now - self.last_access_time > self.timeout

    def is_valid(self, now: Optional[float] = None) -> bool:
        return not self.stopped and not self.is_expired(now)

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set_attribute(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def remove_attribute(self, key: str) -> Any:
        return self._attributes.pop(key, None)

    @property
    def attribute_keys(self) -> frozenset:
        return frozenset(self._attributes)

    def __repr__(self) -> str:
        return (
            f"ChatSession(id={self.id!r}, chat_id={self.chat_id!r}, "
            f"username={self.username!r})"
        )


class SessionManager:
    """Creates, looks up and expires chat sessions.

    start() and get_or_start() also sweep out every stopped or expired
    session, at most once per purge_interval.

    Args:
        timeout: Idle seconds before a new session expires.
        converter: Chat id to session id mapping. Defaults to
            ChatIdConverter (the chat id as a string).
        purge_interval: Minimum seconds between two automatic sweeps.
            Defaults to ``timeout``.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_SESSION_TIMEOUT,
        converter: Optional[ChatIdConverter] = None,
        purge_interval: Optional[int] = None,
    ):
        self.timeout = timeout
        self.converter = converter or ChatIdConverter()
        self.purge_interval = timeout if purge_interval is None else purge_interval
        self._sessions: Dict[str, ChatSession] = {}
        self._lock = threading.Lock()
        self._last_purge = time.time()

    def get_session(self, chat_id: int) -> ChatSession:
        """Return the live session for a chat.

        Stopped or expired sessions are removed before raising.

        Raises:
            UnknownSessionError: No live session for this chat.
        """
        session_id = self.converter.to_session_id(chat_id)
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None and not session.is_valid():
                del self._sessions[session_id]
                logger.debug("session_expired", session_id=session_id)
                session = None
        if session is None:
            raise UnknownSessionError(
                "No session for chat", session_id=session_id
            )
        return session

    def start(self, chat_id: int, username: Optional[str] = None) -> ChatSession:
        """Create a session for a chat, replacing any previous one."""
        self._maybe_purge()
        session_id = self.converter.to_session_id(chat_id)
        session = ChatSession(session_id, chat_id, username, timeout=self.timeout)
        with self._lock:
            self._sessions[session_id] = session
        logger.info("session_started", session_id=session_id)
        return session

    def get_or_start(self, chat_id: int, username: Optional[str] = None) -> ChatSession:
        """Return the chat's live session, creating one if needed.

        Two threads racing on the same new chat get the same session.
        """
        self._maybe_purge()
        session_id = self.converter.to_session_id(chat_id)
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None and session.is_valid():
                return session
            session = ChatSession(session_id, chat_id, username, timeout=self.timeout)
            self._sessions[session_id] = session
        logger.info("session_started", session_id=session_id)
        return session

    def stop(self, chat_id: int) -> bool:
        """Stop and drop a chat's session. Returns True if one existed."""
        session_id = self.converter.to_session_id(chat_id)
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.stop()
        logger.info("session_stopped", session_id=session_id)
        return True

    def purge_expired(self) -> int:
        """Remove every stopped or expired session. Returns how many."""
        now = time.time()
        with self._lock:
            stale = [sid for sid, s in self._sessions.items() if not s.is_valid(now)]
            for sid in stale:
                del self._sessions[sid]
        if stale:
            logger.debug("sessions_purged", count=len(stale))
        return len(stale)

    def _maybe_purge(self) -> None:
        now = time.time()
        with self._lock:
            if now - self._last_purge < self.purge_interval:
                return
            self._last_purge = now
        self.purge_expired()

    def active_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)
