"""Tests for the configuration schema."""

import pytest
from pydantic import ValidationError

from tzbot.config.schema import (
    CommandsConfig,
    ConnectionConfig,
    DiscordConfig,
    RefreshConfig,
    TimezoneBotConfig,
)


class TestTimezoneBotConfig:
    """Test cases for the root configuration model."""

    def test_defaults(self, base_config: TimezoneBotConfig) -> None:
        """Test default values of optional sections."""
        assert base_config.connection.reconnect is True
        assert base_config.connection.retry_delay_seconds == 3.0
        assert base_config.connection.backoff_multiplier == 1.0
        assert base_config.connection.max_attempts is None
        assert base_config.refresh.interval_seconds == 60.0
        assert base_config.commands.overview_cooldown_seconds == 0.0

    def test_comprehensive_values(self, comprehensive_config: TimezoneBotConfig) -> None:
        """Test that every section accepts non-default values."""
        assert comprehensive_config.connection.reconnect is False
        assert comprehensive_config.connection.max_attempts == 4
        assert comprehensive_config.refresh.interval_seconds == 30
        assert comprehensive_config.commands.overview_cooldown_seconds == 10

    def test_from_nested_dict(self) -> None:
        """Test validation from a nested dictionary as loaded from YAML."""
        config = TimezoneBotConfig.model_validate(
            {
                "services": {"discord": {"token": "  padded_token_value_123  "}},
                "refresh": {"interval_seconds": 120},
            }
        )

        assert config.services.discord.token == "padded_token_value_123"
        assert config.refresh.interval_seconds == 120

    def test_missing_services_rejected(self) -> None:
        """Test that the Discord token is required."""
        with pytest.raises(ValidationError):
            _ = TimezoneBotConfig.model_validate({})

    def test_unknown_keys_rejected(self) -> None:
        """Test that unknown top-level keys are rejected."""
        with pytest.raises(ValidationError):
            _ = TimezoneBotConfig.model_validate(
                {"services": {"discord": {"token": "valid_token_123456"}}, "graphs": {}}
            )

    @pytest.mark.parametrize(
        ("section", "values"),
        [
            ("connection", {"reconect": False}),
            ("refresh", {"interval": 30}),
            ("commands", {"overview_cooldown": 10}),
        ],
    )
    def test_misspelled_section_keys_rejected(
        self, section: str, values: dict[str, object]
    ) -> None:
        """Test that a typo inside a section fails instead of falling back to defaults."""
        with pytest.raises(ValidationError) as exc_info:
            _ = TimezoneBotConfig.model_validate(
                {"services": {"discord": {"token": "valid_token_123456"}}, section: values}
            )

        [error] = exc_info.value.errors()
        assert error["type"] == "extra_forbidden"
        assert error["loc"] == (section, next(iter(values)))

    def test_unknown_discord_key_rejected(self) -> None:
        """Test that unknown keys under services.discord are rejected."""
        with pytest.raises(ValidationError):
            _ = TimezoneBotConfig.model_validate(
                {"services": {"discord": {"token": "valid_token_123456", "prefix": "?"}}}
            )

    def test_invalid_config_dict(self, invalid_config_dict: dict[str, object]) -> None:
        """Test that each invalid field is reported."""
        with pytest.raises(ValidationError) as exc_info:
            _ = TimezoneBotConfig.model_validate(invalid_config_dict)

        locations = {error["loc"] for error in exc_info.value.errors()}
        assert ("services", "discord", "token") in locations
        assert ("refresh", "interval_seconds") in locations

    def test_validate_assignment(self, base_config: TimezoneBotConfig) -> None:
        """Test that assignments are validated."""
        with pytest.raises(ValidationError):
            base_config.refresh = {"interval_seconds": 0}  # pyright: ignore[reportAttributeAccessIssue]


class TestSectionModels:
    """Test cases for the section models."""

    def test_short_token_rejected(self) -> None:
        """Test the token length check."""
        with pytest.raises(ValidationError):
            _ = DiscordConfig(token="abc")

    def test_max_delay_below_base_rejected(self) -> None:
        """Test the retry delay bounds check."""
        with pytest.raises(ValidationError):
            _ = ConnectionConfig(retry_delay_seconds=10.0, max_retry_delay_seconds=5.0)

    @pytest.mark.parametrize("multiplier", [0.5, 11])
    def test_backoff_multiplier_bounds(self, multiplier: float) -> None:
        """Test that the backoff multiplier is bounded."""
        with pytest.raises(ValidationError):
            _ = ConnectionConfig(backoff_multiplier=multiplier)

    def test_max_attempts_must_be_positive(self) -> None:
        """Test that max_attempts rejects zero."""
        with pytest.raises(ValidationError):
            _ = ConnectionConfig(max_attempts=0)

    @pytest.mark.parametrize("interval", [4, 3601])
    def test_refresh_interval_bounds(self, interval: float) -> None:
        """Test the refresh interval limits."""
        with pytest.raises(ValidationError):
            _ = RefreshConfig(interval_seconds=interval)

    def test_negative_cooldown_rejected(self) -> None:
        """Test that the overview cooldown cannot be negative."""
        with pytest.raises(ValidationError):
            _ = CommandsConfig(overview_cooldown_seconds=-1)
