"""Configuration loading and schema for the timezone bot."""

from .manager import ConfigManager
from .schema import (
    TimezoneBotConfig,
    ServicesConfig,
    DiscordConfig,
    ConnectionConfig,
    RefreshConfig,
    CommandsConfig,
)

__all__ = [
    "ConfigManager",
    "TimezoneBotConfig",
    "ServicesConfig",
    "DiscordConfig",
    "ConnectionConfig",
    "RefreshConfig",
    "CommandsConfig",
]
