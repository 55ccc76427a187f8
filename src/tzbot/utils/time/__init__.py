"""
Time utilities for the timezone bot.

This package provides zone resolution and clock rendering used by the
refresh tasks and the command router.
"""

from .timezone import (
    get_utc_now,
    resolve_timezone,
    validate_timezone,
    render_time,
)

__all__ = [
    "get_utc_now",
    "resolve_timezone",
    "validate_timezone",
    "render_time",
]
