"""Shared factories for Telegram objects."""

from unittest.mock import MagicMock

import pytest

from telegrambots.commands import BotCommand
from telegrambots.models import Chat, Message, User


def make_message(text=None, chat_id=42, username="alice", message_id=1):
    """Build a Message as the Bot API would deliver it."""
    payload = {
        "message_id": message_id,
        "date": 1700000000,
        "chat": {"id": chat_id, "type": "private"},
        "from": {"id": 7, "is_bot": False, "first_name": "Alice", "username": username},
    }
    if text is not None:
        payload["text"] = text
    return Message.model_validate(payload)


class RecordingCommand(BotCommand):
    """Command that records every execute() call."""

    def __init__(self, identifier, description="test command"):
        super().__init__(identifier, description)
        self.calls = []

    def execute(self, sender, user, chat, arguments):
        self.calls.append((sender, user, chat, list(arguments)))


@pytest.fixture
def sender():
    return MagicMock(name="sender")


@pytest.fixture
def chat():
    return Chat(id=42, type="private")


@pytest.fixture
def user():
    return User(id=7, first_name="Alice", username="alice")
