"""Configuration schema for the timezone bot using nested Pydantic models."""

from typing import Annotated, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ConfigSection(BaseModel):
    """Base for configuration sections; unknown keys are rejected."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


class DiscordConfig(ConfigSection):
    """Discord service configuration."""

    token: str = Field(
        ...,
        description="Discord bot token",
        min_length=1,
    )

    @field_validator("token")
    @classmethod
    def validate_discord_token(cls, v: str) -> str:
        """Validate Discord token format."""
        if len(v) < 10:
            raise ValueError("Discord token appears to be too short")
        return v


class ServicesConfig(ConfigSection):
    """External services configuration."""

    discord: DiscordConfig


class ConnectionConfig(ConfigSection):
    """Gateway connection and reconnection policy."""

    reconnect: bool = Field(
        default=True,
        description="Whether to log in again after the connection is lost",
    )
    retry_delay_seconds: Annotated[float, Field(ge=0, le=3600)] = Field(
        default=3.0,
        description="Delay before retrying a failed login, in seconds",
    )
    backoff_multiplier: Annotated[float, Field(ge=1, le=10)] = Field(
        default=1.0,
        description="Multiplier applied to the delay after each consecutive failure (1 = fixed delay)",
    )
    max_retry_delay_seconds: Annotated[float, Field(ge=0, le=86400)] = Field(
        default=60.0,
        description="Upper bound for the retry delay, in seconds",
    )
    max_attempts: Annotated[int, Field(ge=1)] | None = Field(
        default=None,
        description="Maximum login attempts per outage, or null to retry forever",
    )

    @model_validator(mode="after")
    def validate_delay_bounds(self) -> "ConnectionConfig":
        """Ensure the delay cap is not below the base delay."""
        if self.max_retry_delay_seconds < self.retry_delay_seconds:
            raise ValueError(
                "max_retry_delay_seconds must be >= retry_delay_seconds"
            )
        return self


class RefreshConfig(ConfigSection):
    """Nickname refresh configuration."""

    interval_seconds: Annotated[float, Field(ge=5, le=3600)] = Field(
        default=60.0,
        description="Seconds between nickname refreshes for each guild",
    )


class CommandsConfig(ConfigSection):
    """Chat command configuration."""

    overview_cooldown_seconds: Annotated[float, Field(ge=0, le=3600)] = Field(
        default=0.0,
        description="Per-guild cooldown for the '!time' overview, 0 disables it",
    )


class TimezoneBotConfig(BaseModel):
    """
    Configuration model for the timezone bot with nested structure.

    This model defines all configuration options with validation,
    type hints, and default values.
    """

    services: ServicesConfig
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
    commands: CommandsConfig = Field(default_factory=CommandsConfig)

    model_config: ClassVar[ConfigDict] = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
        frozen=False,
    )
