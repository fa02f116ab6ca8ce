"""Custom exception hierarchy for telegrambots.

Maps every failure the library can raise onto a small set of classes so
callers can catch broadly (``TelegramBotsError``) or precisely. The
argument-validation errors also inherit from the matching builtin
(``ValueError``/``TypeError``/``KeyError``) so generic handlers keep working.

A command that does not match anything is not an error: dispatch reports
that through its boolean return value.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCategory(str, Enum):
    """Classification of errors for escalation decisions."""
    TRANSIENT = "transient"          # May succeed if tried again
    PERMANENT = "permanent"          # Bad input, will fail the same way again
    INFRASTRUCTURE = "infrastructure"  # Deployment or configuration problem


class TelegramBotsError(Exception):
    """Base exception for all telegrambots errors.

    Attributes:
        message: Human-readable error description.
        category: Error classification for escalation decisions.
        module: Originating module name (e.g. "commands.registry").
        context: Arbitrary key-value pairs for structured logging.
    """

    def __init__(
        self,
        message: str = "",
        *,
        category: ErrorCategory = ErrorCategory.PERMANENT,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.message = message
        self.category = category
        self.module = module
        self.context = context
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether this error is worth retrying."""
        return self.category == ErrorCategory.TRANSIENT

    def __str__(self) -> str:
        parts = [self.message or self.__class__.__name__]
        if self.module:
            parts.append(f"[module={self.module}]")
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"({ctx})")
        return " ".join(parts)

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        return (
            f"{cls}({self.message!r}, category={self.category.value!r}, "
            f"module={self.module!r})"
        )


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------

class InvalidArgumentError(TelegramBotsError, ValueError):
    """A supplied value is present but malformed (e.g. an overlong command)."""

    def __init__(
        self,
        message: str = "",
        *,
        category: ErrorCategory = ErrorCategory.PERMANENT,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        super().__init__(
            message, category=category, module=module or "commands", **context
        )


class MissingReferenceError(TelegramBotsError, TypeError):
    """A required argument was ``None``.

    Attributes:
        argument: Name of the missing parameter (if known).
    """

    def __init__(
        self,
        message: str = "",
        *,
        argument: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.PERMANENT,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.argument = argument
        super().__init__(message, category=category, module=module, **context)


def require_not_none(value: Any, argument: str, *, module: Optional[str] = None) -> Any:
    """Return ``value`` unchanged, raising MissingReferenceError if it is None."""
    if value is None:
        raise MissingReferenceError(
            f"{argument} cannot be None", argument=argument, module=module
        )
    return value


# ---------------------------------------------------------------------------
# Configuration exceptions
# ---------------------------------------------------------------------------

class ConfigurationError(MissingReferenceError):
    """A setting the running code depends on is missing.

    Defaults to INFRASTRUCTURE because config issues are environmental
    and won't resolve by retrying.
    """

    def __init__(
        self,
        message: str = "",
        *,
        setting_name: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.setting_name = setting_name
        super().__init__(
            message,
            argument=setting_name,
            category=category,
            module=module or "config",
            **context,
        )


# ---------------------------------------------------------------------------
# Session exceptions
# ---------------------------------------------------------------------------

class UnknownSessionError(TelegramBotsError, KeyError):
    """No live session exists for the requested id.

    Attributes:
        session_id: The id that was looked up.
    """

    def __init__(
        self,
        message: str = "",
        *,
        session_id: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.PERMANENT,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.session_id = session_id
        super().__init__(
            message, category=category, module=module or "sessions", **context
        )
