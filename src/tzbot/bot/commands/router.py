"""
Chat command handling for the ``!time`` command family.

The router turns one inbound message into at most one response payload:
it parses the command, checks administrator permission for mutating
subcommands, reads or updates the guild's settings and sends the response
back to the originating channel. Each invocation is a failure boundary.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from ...storage import ConfigStore
from ...utils.core.exceptions import InvalidZoneError, MessageSendError, StorageError
from ...utils.time import get_utc_now, render_time, validate_timezone
from ..platform import ChatClient
from ..types import CommandOutcome, InboundMessage
from .cooldown import OverviewCooldown

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "!time"

HELP_TEXT = """\
!time - lists all configured timezones with their current local time
!time reset - removes all saved timezones
!time add <timezone> - <timezone> is an IANA timezone name, e.g. Europe/Berlin or America/Los_Angeles
!time remove <timezone> - removes <timezone> from the configuration, if present

Note that only the first two timezones are shown in the nickname of the bot in the member list"""

NO_PERMISSION = CommandOutcome(
    title="Error", description="You lack the necessary permissions"
)
UNKNOWN_COMMAND = CommandOutcome(
    title="Invalid command", description="Sorry, the command was not recognized"
)


class CommandRouter:
    """Parses ``!time`` commands and applies them to guild settings."""

    def __init__(
        self,
        store: ConfigStore,
        client: ChatClient,
        cooldown: OverviewCooldown | None = None,
        clock: Callable[[], datetime] = get_utc_now,
    ) -> None:
        """
        Initialize the router.

        Args:
            store: Settings store mutated by the admin subcommands
            client: Chat client used for permission lookups and responses
            cooldown: Optional debounce for the overview subcommand
            clock: Source of the instant rendered in the overview
        """
        self._store: ConfigStore = store
        self._client: ChatClient = client
        self._cooldown: OverviewCooldown = cooldown or OverviewCooldown()
        self._clock: Callable[[], datetime] = clock

    async def handle_message(self, message: InboundMessage) -> CommandOutcome | None:
        """
        Handle an inbound message and send the response, if any.

        Args:
            message: The inbound chat message

        Returns:
            The response payload that was produced, or None for ignored messages
        """
        outcome = await self.route(message)
        if outcome is None:
            return None

        try:
            await self._client.send_message(message.channel_id, outcome)
        except MessageSendError as e:
            logger.warning(f"Could not send response to channel {message.channel_id}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error sending response to channel {message.channel_id}: {e}")

        return outcome

    async def route(self, message: InboundMessage) -> CommandOutcome | None:
        """
        Parse a message and compute its response payload without sending it.

        Args:
            message: The inbound chat message

        Returns:
            The response payload, or None if the message is not a command
            that should be answered
        """
        if not message.is_text_channel:
            return None

        words = message.content.split(" ")
        if words[0] != COMMAND_PREFIX:
            return None

        if not message.has_member or message.guild_id is None:
            logger.info(
                f"Command from user {message.author_id} without member information, skipping"
            )
            return None

        guild_id = message.guild_id
        subcommand = words[1] if len(words) > 1 else None
        argument = words[2] if len(words) > 2 else None

        try:
            match subcommand:
                case "help":
                    return CommandOutcome(title="Commands available", description=HELP_TEXT)
                case "add":
                    return await self._add(guild_id, message.author_id, argument)
                case "remove":
                    return await self._remove(guild_id, message.author_id, argument)
                case "reset":
                    return await self._reset(guild_id, message.author_id)
                case None:
                    return await self._overview(guild_id)
                case _:
                    return UNKNOWN_COMMAND
        except StorageError as e:
            logger.error(f"Storage error handling '{message.content}' in guild {guild_id}: {e}")
            return CommandOutcome(title="Error", description=e.user_message)
        except Exception as e:
            logger.exception(f"Error handling '{message.content}' in guild {guild_id}: {e}")
            return CommandOutcome(
                title="Error", description="Something went wrong while handling the command"
            )

    async def _is_admin(self, guild_id: int, user_id: int) -> bool:
        try:
            permissions = await self._client.get_permissions(guild_id, user_id)
        except Exception as e:
            logger.error(
                f"Could not look up permissions of user {user_id} "
                + f"in guild {guild_id}: {e}"
            )
            return False
        return permissions.administrator

    async def _add(self, guild_id: int, user_id: int, zone_id: str | None) -> CommandOutcome:
        if not await self._is_admin(guild_id, user_id):
            return NO_PERMISSION
        if not zone_id:
            return CommandOutcome(title="Error", description=f"Usage: {COMMAND_PREFIX} add <timezone>")

        try:
            validate_timezone(zone_id)
        except InvalidZoneError as e:
            return CommandOutcome(title="Error", description=e.user_message)

        _ = await self._store.add_timezone(guild_id, zone_id)
        logger.info(f"Added timezone {zone_id} in guild {guild_id}")
        return CommandOutcome(
            title="Success",
            description=(
                f"The timezone {zone_id} was added successfully. "
                + "Updates to the nickname take up to one minute"
            ),
        )

    async def _remove(self, guild_id: int, user_id: int, zone_id: str | None) -> CommandOutcome:
        if not await self._is_admin(guild_id, user_id):
            return NO_PERMISSION
        if not zone_id:
            return CommandOutcome(title="Error", description=f"Usage: {COMMAND_PREFIX} remove <timezone>")

        if not await self._store.remove_timezone(guild_id, zone_id):
            return CommandOutcome(
                title="Error/Success",
                description=f"{zone_id} was never configured in the first place",
            )

        logger.info(f"Removed timezone {zone_id} in guild {guild_id}")
        return CommandOutcome(
            title="Success",
            description=f"{zone_id} removed from config. Updates to the nickname take up to one minute",
        )

    async def _reset(self, guild_id: int, user_id: int) -> CommandOutcome:
        if not await self._is_admin(guild_id, user_id):
            return NO_PERMISSION

        await self._store.reset(guild_id)
        logger.info(f"Reset timezones in guild {guild_id}")
        return CommandOutcome(title="Success", description="All configured timezones were removed")

    async def _overview(self, guild_id: int) -> CommandOutcome | None:
        if not self._cooldown.try_acquire(guild_id):
            return None

        settings = await self._store.load(guild_id)
        if not settings.timezones:
            return CommandOutcome(title="Timezone overview", description="No timezones configured!")

        instant = self._clock()
        lines: list[str] = []
        for zone_id in settings.timezones:
            try:
                lines.append(f"{zone_id}: {render_time(zone_id, instant)}")
            except InvalidZoneError:
                lines.append(f"{zone_id}: invalid timezone")

        return CommandOutcome(title="Timezone overview", description="\n".join(lines))
