"""
Core types and constants for the nickname refresh system.
"""

from enum import Enum


class TaskStatus(Enum):
    """Lifecycle of a guild refresh task. STOPPED is terminal."""

    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"


DEFAULT_REFRESH_INTERVAL: float = 60.0

NOT_CONFIGURED_LABEL = "Not Configured"
INVALID_TIMEZONES_LABEL = "Invalid timezones"

# Only this many rendered zones fit into the nickname
MAX_NICKNAME_LABELS = 2
NICKNAME_SEPARATOR = ", "
