"""Tests for Bot API model parsing."""

from telegrambots.models import Message, Update


def test_update_parsed_from_bot_api_payload():
    payload = {
        "update_id": 10001,
        "message": {
            "message_id": 5,
            "date": 1700000000,
            "chat": {"id": -100123, "type": "supergroup", "title": "Team"},
            "from": {"id": 7, "is_bot": False, "first_name": "Alice", "username": "alice"},
            "text": "/start@mybot",
            "entities": [{"offset": 0, "length": 12, "type": "bot_command"}],
        },
    }
    update = Update.model_validate(payload)
    assert update.has_message()
    assert not update.has_callback_query()
    assert update.message.chat_id == -100123
    assert update.message.from_user.username == "alice"
    assert update.message.has_text()


def test_message_without_text():
    message = Message.model_validate(
        {"message_id": 1, "chat": {"id": 1, "type": "private"}, "photo": []}
    )
    assert message.has_text() is False
    assert message.from_user is None


def test_empty_text_is_not_text():
    message = Message.model_validate(
        {"message_id": 1, "chat": {"id": 1}, "text": ""}
    )
    assert message.has_text() is False


def test_callback_query_update():
    update = Update.model_validate({
        "update_id": 2,
        "callback_query": {
            "id": "abc",
            "from": {"id": 7, "first_name": "Alice"},
            "data": "choice:1",
            "message": {"message_id": 9, "chat": {"id": 3, "type": "private"}},
        },
    })
    assert update.has_callback_query()
    assert update.callback_query.message.chat_id == 3
    assert update.callback_query.from_user.id == 7
