"""
Global test configuration fixtures for timezone bot tests.

Provides validated configuration objects, in-memory stores and a recording
chat client shared by the unit and integration tests.
"""

from __future__ import annotations

import pytest

from tzbot.config.schema import (
    CommandsConfig,
    ConnectionConfig,
    DiscordConfig,
    RefreshConfig,
    ServicesConfig,
    TimezoneBotConfig,
)
from tzbot.storage import ConfigStore
from tests.utils.test_helpers import GUILD_ID, FakeChatClient, StoreSpy


@pytest.fixture
def base_config() -> TimezoneBotConfig:
    """
    Create a configuration with only the required values set.

    Returns:
        TimezoneBotConfig: Configuration using defaults for everything else
    """
    return TimezoneBotConfig(
        services=ServicesConfig(
            discord=DiscordConfig(token="test_discord_token_1234567890"),
        ),
    )


@pytest.fixture
def comprehensive_config() -> TimezoneBotConfig:
    """
    Create a configuration with every section set to non-default values.

    Returns:
        TimezoneBotConfig: Fully specified configuration
    """
    return TimezoneBotConfig(
        services=ServicesConfig(
            discord=DiscordConfig(token="comprehensive_discord_token_1234567890"),
        ),
        connection=ConnectionConfig(
            reconnect=False,
            retry_delay_seconds=5.0,
            backoff_multiplier=2.0,
            max_retry_delay_seconds=120.0,
            max_attempts=4,
        ),
        refresh=RefreshConfig(interval_seconds=30),
        commands=CommandsConfig(overview_cooldown_seconds=10),
    )


@pytest.fixture
def invalid_config_dict() -> dict[str, object]:
    """
    Create an invalid configuration dictionary for testing error scenarios.

    Returns:
        dict[str, object]: Configuration dictionary with validation issues
    """
    return {
        "services": {
            "discord": {
                "token": "short",  # Too short
            },
        },
        "refresh": {
            "interval_seconds": 1,  # Below minimum
        },
    }


@pytest.fixture
def store_spy() -> StoreSpy:
    """Empty in-memory store that counts reads and writes."""
    return StoreSpy()


@pytest.fixture
def config_store(store_spy: StoreSpy) -> ConfigStore:
    """Settings store backed by ``store_spy``."""
    return ConfigStore(store_spy)


@pytest.fixture
def fake_client() -> FakeChatClient:
    """Chat client that is a member of ``GUILD_ID``."""
    return FakeChatClient(guilds=[GUILD_ID])
