"""Tests for timezone resolution and time rendering."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from tzbot.utils.core.exceptions import InvalidZoneError
from tzbot.utils.time import get_utc_now, render_time, resolve_timezone, validate_timezone
from tests.utils.test_helpers import FIXED_INSTANT


class TestGetUtcNow:
    """Test cases for get_utc_now."""

    def test_returns_aware_utc(self) -> None:
        """Test that the current instant is timezone-aware UTC."""
        now = get_utc_now()

        assert now.tzinfo is not None
        assert now.utcoffset() == timezone.utc.utcoffset(now)


class TestResolveTimezone:
    """Test cases for resolve_timezone and validate_timezone."""

    def test_resolves_known_zone(self) -> None:
        """Test resolving a canonical IANA id."""
        assert resolve_timezone("Europe/Berlin") == ZoneInfo("Europe/Berlin")

    @pytest.mark.parametrize(
        "zone_id",
        ["", "Mars/Olympus_Mons", "not a zone", "/etc/passwd", "../Europe/Berlin"],
    )
    def test_invalid_zones_raise(self, zone_id: str) -> None:
        """Test that unknown or malformed ids raise InvalidZoneError."""
        with pytest.raises(InvalidZoneError) as exc_info:
            validate_timezone(zone_id)

        assert exc_info.value.zone_id == zone_id

    def test_error_user_message_mentions_zone(self) -> None:
        """Test that the user-facing message names the rejected id."""
        with pytest.raises(InvalidZoneError) as exc_info:
            validate_timezone("Nowhere/Land")

        assert exc_info.value.user_message == "Nowhere/Land is not a valid timezone!"


class TestRenderTime:
    """Test cases for render_time."""

    @pytest.mark.parametrize(
        ("zone_id", "expected"),
        [
            ("Europe/Berlin", "9:05pm CEST"),
            ("America/New_York", "3:05pm EDT"),
            ("Asia/Tokyo", "4:05am JST"),
            ("UTC", "7:05pm UTC"),
        ],
    )
    def test_renders_local_time(self, zone_id: str, expected: str) -> None:
        """Test rendering a fixed instant in several zones."""
        assert render_time(zone_id, FIXED_INSTANT) == expected

    def test_uses_standard_time_abbreviation_in_winter(self) -> None:
        """Test that the abbreviation follows daylight saving rules."""
        instant = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

        assert render_time("Europe/Berlin", instant) == "1:00pm CET"

    @pytest.mark.parametrize(
        ("hour", "expected"),
        [(0, "12:30am UTC"), (11, "11:30am UTC"), (12, "12:30pm UTC"), (23, "11:30pm UTC")],
    )
    def test_twelve_hour_clock_boundaries(self, hour: int, expected: str) -> None:
        """Test midnight and noon rendering."""
        instant = datetime(2025, 3, 1, hour, 30, tzinfo=timezone.utc)

        assert render_time("UTC", instant) == expected

    def test_naive_instant_is_treated_as_utc(self) -> None:
        """Test that a naive datetime is interpreted as UTC."""
        naive = datetime(2025, 7, 1, 19, 5)

        assert render_time("Europe/Berlin", naive) == "9:05pm CEST"

    def test_defaults_to_now(self) -> None:
        """Test that omitting the instant renders the current time."""
        rendered = render_time("UTC")

        assert rendered.endswith(" UTC")
        assert rendered[-6:-4] in {"am", "pm"}

    def test_invalid_zone_raises(self) -> None:
        """Test that rendering an unknown zone raises."""
        with pytest.raises(InvalidZoneError):
            _ = render_time("Invalid/Zone", FIXED_INSTANT)
