"""Pydantic models for the Telegram Bot API objects the library consumes.

Only the fields used for command dispatch and session lookup are
declared; any other field in an incoming payload is ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramObject(BaseModel):
    """Common model configuration for Bot API objects."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class User(TelegramObject):
    """A Telegram user or bot."""

    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class Chat(TelegramObject):
    """A private chat, group, supergroup or channel."""

    id: int
    type: str = Field(default="private", description="'private', 'group', 'supergroup' or 'channel'")
    title: Optional[str] = None
    username: Optional[str] = None


class Message(TelegramObject):
    """An incoming message."""

    message_id: int
    date: int = 0
    chat: Chat
    from_user: Optional[User] = Field(default=None, alias="from")
    text: Optional[str] = None

    def has_text(self) -> bool:
        return self.text is not None and self.text != ""

    @property
    def chat_id(self) -> int:
        return self.chat.id


class CallbackQuery(TelegramObject):
    """A callback from an inline keyboard button."""

    id: str
    from_user: User = Field(..., alias="from")
    message: Optional[Message] = None
    data: Optional[str] = None


class Update(TelegramObject):
    """A single update delivered by the Bot API."""

    update_id: int
    message: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None

    def has_message(self) -> bool:
        return self.message is not None

    def has_callback_query(self) -> bool:
        return self.callback_query is not None
