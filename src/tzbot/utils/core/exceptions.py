"""
Basic exception classes for the timezone bot.

This module contains the exception hierarchy shared by the storage layer,
the refresh tasks, the command router and the connection supervisor. Every
class carries a category and severity so failure boundaries can log them
consistently.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    NETWORK = "network"
    PERMISSION = "permission"
    VALIDATION = "validation"
    RESOURCE = "resource"
    DISCORD = "discord"
    UNKNOWN = "unknown"


class TimezoneBotError(Exception):
    """Base exception class for timezone bot specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class InvalidZoneError(TimezoneBotError):
    """Raised when an IANA zone id cannot be resolved."""

    def __init__(self, zone_id: str, context: object | None = None) -> None:
        super().__init__(
            f"Unknown or malformed timezone identifier: {zone_id!r}",
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            user_message=f"{zone_id} is not a valid timezone!",
            context=context,
            recoverable=True,
        )
        self.zone_id: str = zone_id


class StorageError(TimezoneBotError):
    """Reading from or writing to the key-value store failed."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.RESOURCE,
            severity=ErrorSeverity.HIGH,
            user_message="The bot's settings storage is currently unavailable, please try again later",
            context=context,
            recoverable=True,
        )
        self.key: str | None = key


class PresenceUpdateError(TimezoneBotError):
    """The platform rejected a nickname update (permissions, rate limit, network)."""

    def __init__(
        self,
        message: str,
        guild_id: int | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.DISCORD,
            severity=ErrorSeverity.MEDIUM,
            context=context,
            recoverable=True,
        )
        self.guild_id: int | None = guild_id


class MessageSendError(TimezoneBotError):
    """A command response could not be delivered to its channel."""

    def __init__(
        self,
        message: str,
        channel_id: int | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.DISCORD,
            severity=ErrorSeverity.LOW,
            context=context,
            recoverable=True,
        )
        self.channel_id: int | None = channel_id


class GatewayConnectionError(TimezoneBotError):
    """Logging in to the chat platform or opening the gateway failed."""

    def __init__(
        self,
        message: str,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.NETWORK,
            severity=ErrorSeverity.HIGH,
            context=context,
            recoverable=recoverable,
        )
