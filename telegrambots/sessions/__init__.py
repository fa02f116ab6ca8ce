"""Chat sessions for Telegram bots.

Provides ChatSession, the thread-safe SessionManager keyed by chat id,
and the SessionBot base class that attaches a session to each update.
"""

from .bot import SessionBot
from .session import ChatIdConverter, ChatSession, SessionManager

__all__ = [
    "ChatIdConverter",
    "ChatSession",
    "SessionBot",
    "SessionManager",
]
