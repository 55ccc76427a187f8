"""
discord.py implementation of the chat client capability surface.

``DiscordChatClient`` wraps a ``discord.Client`` whose gateway runs with
``reconnect=False``: reconnection is owned by the ``ConnectionSupervisor``,
so the gateway ending is reported as a ``ConnectionLost`` event instead of
being retried inside discord.py.
"""

import asyncio
import logging
from collections.abc import Callable
from typing_extensions import override

import discord

from ..utils.core.exceptions import (
    GatewayConnectionError,
    MessageSendError,
    PresenceUpdateError,
)
from .events import ConnectionLost, Event, GuildJoined, GuildLeft, MessageReceived
from .types import CommandOutcome, InboundMessage

logger = logging.getLogger(__name__)

# Errors the platform raises for rejected or failed REST calls
_TRANSPORT_ERRORS = (discord.HTTPException, discord.ClientException, OSError, asyncio.TimeoutError)


def create_intents() -> discord.Intents:
    """Intents needed to read ``!time`` commands in guild text channels."""
    intents = discord.Intents.default()
    # Privileged intent: commands are parsed from message text
    intents.message_content = True
    return intents


def build_embed(outcome: CommandOutcome) -> discord.Embed:
    """Render a response payload as a Discord embed."""
    embed = discord.Embed(
        title=outcome.title,
        description=outcome.description,
        color=discord.Color.blurple(),
    )
    for field in outcome.fields:
        _ = embed.add_field(name=field.name, value=field.value, inline=field.inline)
    return embed


def to_inbound_message(message: discord.Message) -> InboundMessage:
    """Translate a discord.py message into the platform-neutral form."""
    return InboundMessage(
        content=message.clean_content,
        author_id=message.author.id,
        guild_id=message.guild.id if message.guild is not None else None,
        channel_id=message.channel.id,
        is_text_channel=isinstance(message.channel, discord.TextChannel),
        has_member=isinstance(message.author, discord.Member),
    )


class _GatewayClient(discord.Client):
    """discord.Client forwarding gateway events to its owner."""

    def __init__(self, owner: "DiscordChatClient", intents: discord.Intents) -> None:
        super().__init__(intents=intents)
        self._owner: "DiscordChatClient" = owner

    async def on_ready(self) -> None:
        logger.info(f"Logged in as {self.user} in {len(self.guilds)} guild(s)")
        self._owner.notify_ready()

    async def on_message(self, message: discord.Message) -> None:
        if self.user is not None and message.author.id == self.user.id:
            return
        self._owner.publish(MessageReceived(to_inbound_message(message)))

    async def on_guild_join(self, guild: discord.Guild) -> None:
        self._owner.publish(GuildJoined(guild.id))

    async def on_guild_remove(self, guild: discord.Guild) -> None:
        self._owner.publish(GuildLeft(guild.id))

    async def on_disconnect(self) -> None:
        logger.warning("Gateway disconnected")

    @override
    async def on_error(self, event_method: str, /, *args: object, **kwargs: object) -> None:
        logger.exception(f"Unhandled exception in event '{event_method}'")


class DiscordChatClient:
    """Chat client backed by discord.py."""

    def __init__(
        self,
        token: str,
        intents: discord.Intents | None = None,
        ready_timeout: float = 60.0,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Discord bot token
            intents: Gateway intents, defaults to ``create_intents()``
            ready_timeout: Seconds to wait for the ready event after login
        """
        self._token: str = token
        self._client: _GatewayClient = _GatewayClient(self, intents or create_intents())
        self._ready_timeout: float = ready_timeout
        self._publish: Callable[[Event], None] | None = None
        self._gateway_task: asyncio.Task[None] | None = None
        self._ready: asyncio.Event = asyncio.Event()
        self._connected: bool = False
        self._closing: bool = False

    def set_event_sink(self, publish: Callable[[Event], None]) -> None:
        """Set the callable receiving translated platform events."""
        self._publish = publish

    def publish(self, event: Event) -> None:
        if self._publish is None:
            logger.debug(f"No event sink set, dropping {event!r}")
            return
        self._publish(event)

    def notify_ready(self) -> None:
        self._ready.set()

    async def login(self) -> None:
        """
        Log in and open the gateway, returning once the session is ready.

        Raises:
            GatewayConnectionError: If login fails or the gateway does not
                become ready in time
        """
        self._closing = False
        if self._client.is_closed():
            # A closed client must be reset before it can log in again
            self._client.clear()

        try:
            await self._client.login(self._token)
        except discord.LoginFailure as e:
            raise GatewayConnectionError(
                f"Discord rejected the bot token: {e}", recoverable=False
            ) from e
        except Exception as e:
            raise GatewayConnectionError(f"Discord login failed: {e}") from e

        self._ready = asyncio.Event()
        self._connected = False
        gateway = asyncio.create_task(
            self._client.connect(reconnect=False), name="discord-gateway"
        )
        gateway.add_done_callback(self._on_gateway_done)
        self._gateway_task = gateway

        ready_wait = asyncio.create_task(self._ready.wait())
        done, _ = await asyncio.wait(
            {ready_wait, gateway},
            timeout=self._ready_timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )

        if ready_wait in done and not gateway.done():
            self._connected = True
            return

        _ = ready_wait.cancel()
        await self._shutdown_gateway()
        raise GatewayConnectionError("Gateway closed before the session became ready")

    def _on_gateway_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            reason = "gateway task cancelled"
        elif (error := task.exception()) is not None:
            reason = f"{type(error).__name__}: {error}"
        else:
            reason = "gateway closed"

        if not self._connected or self._closing:
            logger.debug(f"Gateway finished ({reason})")
            return

        self._connected = False
        logger.warning(f"Gateway finished ({reason})")
        self.publish(ConnectionLost(reason))

    async def _shutdown_gateway(self) -> None:
        task = self._gateway_task
        self._gateway_task = None
        if task is not None and not task.done():
            _ = task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Gateway task ended with {e!r} during shutdown")

        if not self._client.is_closed():
            await self._client.close()

    async def close(self) -> None:
        """Close the gateway without reporting a connection loss."""
        self._closing = True
        self._connected = False
        await self._shutdown_gateway()

    def guild_ids(self) -> list[int]:
        return [guild.id for guild in self._client.guilds]

    async def has_self_member(self, guild_id: int) -> bool:
        guild = self._client.get_guild(guild_id)
        user = self._client.user
        if guild is None or user is None:
            return False

        if guild.me is not None:  # pyright: ignore[reportUnnecessaryComparison]
            return guild.me.id == user.id

        try:
            member = await guild.fetch_member(user.id)
        except _TRANSPORT_ERRORS as e:
            logger.warning(f"Could not fetch own member in guild {guild_id}: {e}")
            return False
        return member.id == user.id

    async def set_display_name(self, guild_id: int, text: str) -> None:
        guild = self._client.get_guild(guild_id)
        if guild is None:
            raise PresenceUpdateError(f"Guild {guild_id} is not available", guild_id=guild_id)

        try:
            _ = await guild.me.edit(nick=text)
        except discord.Forbidden as e:
            raise PresenceUpdateError(
                f"Missing permission to change nickname in guild {guild_id}: {e}",
                guild_id=guild_id,
            ) from e
        except _TRANSPORT_ERRORS as e:
            raise PresenceUpdateError(
                f"Nickname update failed in guild {guild_id}: {e}", guild_id=guild_id
            ) from e

    async def send_message(self, channel_id: int, outcome: CommandOutcome) -> None:
        try:
            channel = self._client.get_channel(channel_id) or await self._client.fetch_channel(channel_id)
        except _TRANSPORT_ERRORS as e:
            raise MessageSendError(
                f"Channel {channel_id} is not available: {e}", channel_id=channel_id
            ) from e

        if not isinstance(channel, discord.abc.Messageable):
            raise MessageSendError(
                f"Channel {channel_id} does not accept messages", channel_id=channel_id
            )

        try:
            _ = await channel.send(embed=build_embed(outcome))
        except _TRANSPORT_ERRORS as e:
            raise MessageSendError(
                f"Error sending message to channel {channel_id}: {e}", channel_id=channel_id
            ) from e

    async def get_permissions(self, guild_id: int, user_id: int) -> discord.Permissions:
        guild = self._client.get_guild(guild_id)
        if guild is None:
            return discord.Permissions.none()

        member = guild.get_member(user_id)
        if member is None:
            try:
                member = await guild.fetch_member(user_id)
            except _TRANSPORT_ERRORS as e:
                logger.warning(f"Could not fetch member {user_id} in guild {guild_id}: {e}")
                return discord.Permissions.none()

        return member.guild_permissions
