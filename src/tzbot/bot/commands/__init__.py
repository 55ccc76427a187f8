"""Chat command handling."""

from .cooldown import OverviewCooldown
from .router import COMMAND_PREFIX, HELP_TEXT, CommandRouter

__all__ = ["COMMAND_PREFIX", "HELP_TEXT", "CommandRouter", "OverviewCooldown"]
