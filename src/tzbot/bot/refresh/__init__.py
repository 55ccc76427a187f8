"""
Nickname refresh package.

One recurring task per guild renders the configured timezones into the
bot's nickname; the registry owns the task lifecycle.
"""

from .types import (
    TaskStatus,
    DEFAULT_REFRESH_INTERVAL,
    NOT_CONFIGURED_LABEL,
    INVALID_TIMEZONES_LABEL,
)
from .task import GuildRefreshTask, render_labels, build_nickname
from .registry import RefreshRegistry

__all__ = [
    "TaskStatus",
    "DEFAULT_REFRESH_INTERVAL",
    "NOT_CONFIGURED_LABEL",
    "INVALID_TIMEZONES_LABEL",
    "GuildRefreshTask",
    "render_labels",
    "build_nickname",
    "RefreshRegistry",
]
