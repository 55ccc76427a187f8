"""
Timezone rendering utilities for the timezone bot.

This module resolves IANA zone identifiers and renders an instant as the
short clock string shown in the bot's nickname and in the overview command.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import InvalidZoneError


def get_utc_now() -> datetime:
    """
    Get the current instant as a timezone-aware UTC datetime.

    Returns:
        Current datetime in UTC (timezone-aware)

    Examples:
        >>> now = get_utc_now()
        >>> now.tzinfo is not None
        True
    """
    return datetime.now(timezone.utc)


def resolve_timezone(zone_id: str) -> ZoneInfo:
    """
    Resolve an IANA zone identifier to a ZoneInfo object.

    Args:
        zone_id: IANA identifier, e.g. ``Europe/Berlin``

    Returns:
        ZoneInfo for the identifier

    Raises:
        InvalidZoneError: If the identifier is empty, malformed or unknown
    """
    if not zone_id:
        raise InvalidZoneError(zone_id)

    try:
        return ZoneInfo(zone_id)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        # ValueError covers malformed keys such as absolute or relative paths
        raise InvalidZoneError(zone_id) from e


def validate_timezone(zone_id: str) -> None:
    """
    Check that a zone identifier can be rendered.

    Args:
        zone_id: IANA identifier to validate

    Raises:
        InvalidZoneError: If the identifier cannot be resolved
    """
    _ = resolve_timezone(zone_id)


def render_time(zone_id: str, instant: datetime | None = None) -> str:
    """
    Render an instant as a 12-hour clock string in the given zone.

    The output is locale independent: hour without leading zero, minutes,
    a lower-case ``am``/``pm`` marker and the zone abbreviation.

    Args:
        zone_id: IANA identifier of the zone to render in
        instant: Timezone-aware instant to render, defaults to now

    Returns:
        Display string such as ``9:05pm CEST``

    Raises:
        InvalidZoneError: If the identifier cannot be resolved

    Examples:
        >>> render_time("UTC", datetime(2025, 1, 1, 13, 5, tzinfo=timezone.utc))
        '1:05pm UTC'
    """
    zone = resolve_timezone(zone_id)
    if instant is None:
        instant = get_utc_now()
    elif instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)

    local = instant.astimezone(zone)
    hour = local.hour % 12 or 12
    marker = "am" if local.hour < 12 else "pm"
    abbreviation = local.tzname() or zone_id
    return f"{hour}:{local.minute:02d}{marker} {abbreviation}"
