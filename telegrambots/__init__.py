"""telegrambots - command dispatch and chat sessions for Telegram bots."""

__version__ = "0.1.0"
