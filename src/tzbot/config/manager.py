"""Configuration manager for the timezone bot.

This module provides functionality for loading and validating YAML
configuration files with Pydantic model validation, and for writing a
documented sample file.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .schema import TimezoneBotConfig


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager for handling YAML config files with Pydantic validation.

    Loads and validates configuration files and generates the sample
    configuration.
    """

    @staticmethod
    def load_config(config_path: Path) -> TimezoneBotConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            TimezoneBotConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the document is not a mapping
            ValidationError: If the configuration fails Pydantic validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        try:
            return TimezoneBotConfig.model_validate(config_data)
        except ValidationError:
            logger.error(f"Configuration in {config_path} failed validation")
            raise

    @staticmethod
    def create_sample_config(sample_path: Path) -> None:
        """
        Create a sample configuration file with all options and documentation.

        Args:
            sample_path: Path where to create the sample configuration file
        """
        _ = sample_path.parent.mkdir(parents=True, exist_ok=True)
        _ = sample_path.write_text(ConfigManager._generate_sample_content(), encoding="utf-8")

    @staticmethod
    def _generate_sample_content() -> str:
        """
        Generate sample configuration file content with documentation.

        Returns:
            str: Sample configuration file content
        """
        return """# Timezone Bot Configuration File
# Copy this file to config.yml and modify the values as needed.

# ============================================================================
# Required Configuration
# ============================================================================

services:
  discord:
    # Discord bot token - Get this from Discord Developer Portal
    token: "your_discord_bot_token_here"

# ============================================================================
# Connection
# ============================================================================

connection:
  # Log in again after the connection to Discord is lost
  reconnect: true
  # Seconds to wait before retrying a failed login
  retry_delay_seconds: 3.0
  # Multiply the delay by this factor after each failure (1.0 = fixed delay)
  backoff_multiplier: 1.0
  # Upper bound for the retry delay in seconds
  max_retry_delay_seconds: 60.0
  # Maximum login attempts per outage, or null to retry forever
  max_attempts: null

# ============================================================================
# Nickname Refresh
# ============================================================================

refresh:
  # Seconds between nickname updates in each guild (5-3600)
  interval_seconds: 60

# ============================================================================
# Commands
# ============================================================================

commands:
  # Per-guild cooldown for the plain '!time' overview in seconds, 0 disables it
  overview_cooldown_seconds: 0
"""
