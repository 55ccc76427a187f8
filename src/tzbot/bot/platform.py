"""
Capability surface of the chat platform used by the bot core.

The refresh tasks, the command router and the connection supervisor only
talk to the platform through this protocol, which keeps them independent of
the Discord transport and lets tests substitute a fake client.
"""

from typing import Protocol

import discord

from .types import CommandOutcome


class ChatClient(Protocol):
    """Operations the bot core needs from the chat platform."""

    async def login(self) -> None:
        """
        Establish a session and return once it is ready.

        Raises:
            GatewayConnectionError: If the session cannot be established
        """
        ...

    async def close(self) -> None: ...

    def guild_ids(self) -> list[int]:
        """Ids of the guilds the bot currently belongs to."""
        ...

    async def has_self_member(self, guild_id: int) -> bool:
        """Whether the bot's own membership in the guild can be resolved."""
        ...

    async def set_display_name(self, guild_id: int, text: str) -> None:
        """
        Set the bot's nickname in a guild.

        Raises:
            PresenceUpdateError: If the platform rejects the update
        """
        ...

    async def send_message(self, channel_id: int, outcome: CommandOutcome) -> None:
        """
        Send a response payload to a channel.

        Raises:
            MessageSendError: If the message cannot be delivered
        """
        ...

    async def get_permissions(self, guild_id: int, user_id: int) -> discord.Permissions:
        """Guild-level permissions of a member (no permissions if unknown)."""
        ...
