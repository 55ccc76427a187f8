"""Bot runtime: refresh tasks, commands, connection supervision and event dispatch."""

from .connection import ConnectionState, ConnectionSupervisor, RetryPolicy
from .events import (
    ConnectionLost,
    Event,
    EventCategory,
    EventDispatcher,
    GuildJoined,
    GuildLeft,
    MessageReceived,
)
from .platform import ChatClient
from .types import CommandOutcome, EmbedField, InboundMessage

__all__ = [
    "ChatClient",
    "CommandOutcome",
    "ConnectionLost",
    "ConnectionState",
    "ConnectionSupervisor",
    "EmbedField",
    "Event",
    "EventCategory",
    "EventDispatcher",
    "GuildJoined",
    "GuildLeft",
    "InboundMessage",
    "MessageReceived",
    "RetryPolicy",
]
