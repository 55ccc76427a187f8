"""Core utilities shared across the timezone bot."""

from .exceptions import (
    ErrorCategory,
    ErrorSeverity,
    TimezoneBotError,
    InvalidZoneError,
    StorageError,
    PresenceUpdateError,
    MessageSendError,
    GatewayConnectionError,
)

__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "TimezoneBotError",
    "InvalidZoneError",
    "StorageError",
    "PresenceUpdateError",
    "MessageSendError",
    "GatewayConnectionError",
]
