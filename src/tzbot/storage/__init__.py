"""Persistence of per-guild timezone settings."""

from .guild_settings import ConfigStore, GuildSettings
from .kv_store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "ConfigStore",
    "GuildSettings",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
]
