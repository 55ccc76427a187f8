"""
Per-guild nickname refresh task.

Each joined guild gets one ``GuildRefreshTask``: an asyncio task that
renders the guild's configured timezones and writes them into the bot's
nickname, once immediately and then every refresh interval. Every tick is a
failure boundary; nothing that goes wrong in one tick stops the task or
affects the tasks of other guilds.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from ...storage import ConfigStore
from ...utils.core.exceptions import InvalidZoneError, PresenceUpdateError, StorageError
from ...utils.time import get_utc_now, render_time
from ..platform import ChatClient
from .types import (
    DEFAULT_REFRESH_INTERVAL,
    INVALID_TIMEZONES_LABEL,
    MAX_NICKNAME_LABELS,
    NICKNAME_SEPARATOR,
    NOT_CONFIGURED_LABEL,
    TaskStatus,
)

logger = logging.getLogger(__name__)


def render_labels(timezones: Sequence[str], instant: datetime) -> list[str]:
    """
    Render the label set shown for a guild.

    Args:
        timezones: Configured zone ids in display order
        instant: Instant to render

    Returns:
        One label per zone, or a single placeholder label when nothing is
        configured or any zone fails to render
    """
    if not timezones:
        return [NOT_CONFIGURED_LABEL]

    try:
        return [render_time(zone_id, instant) for zone_id in timezones]
    except InvalidZoneError as e:
        logger.warning(f"Stored timezone {e.zone_id!r} cannot be rendered")
        return [INVALID_TIMEZONES_LABEL]


def build_nickname(labels: Sequence[str]) -> str:
    """Join the first labels into the nickname text."""
    return NICKNAME_SEPARATOR.join(labels[:MAX_NICKNAME_LABELS])


class GuildRefreshTask:
    """
    Recurring nickname refresh for one guild.

    The loop awaits each tick completely before sleeping, so ticks of the
    same guild never overlap. ``stop`` cancels the underlying task; a
    stopped handle is never restarted.
    """

    def __init__(
        self,
        guild_id: int,
        store: ConfigStore,
        client: ChatClient,
        interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], datetime] = get_utc_now,
    ) -> None:
        """
        Initialize the refresh task.

        Args:
            guild_id: Guild whose nickname is refreshed
            store: Settings store to read the configured timezones from
            client: Chat client used to set the nickname
            interval: Seconds between ticks
            clock: Source of the instant to render
        """
        self.guild_id: int = guild_id
        self.interval: float = interval
        self._store: ConfigStore = store
        self._client: ChatClient = client
        self._clock: Callable[[], datetime] = clock
        self._task: asyncio.Task[None] | None = None
        self._status: TaskStatus = TaskStatus.STARTING
        self._stop_requested: bool = False
        self.tick_count: int = 0
        self.last_nickname: str | None = None

    @property
    def status(self) -> TaskStatus:
        return self._status

    def start(self) -> None:
        """Schedule the refresh loop. The first tick runs without delay."""
        if self._task is not None or self._stop_requested:
            logger.debug(f"Refresh task for guild {self.guild_id} already started or stopped")
            return

        self._task = asyncio.create_task(
            self._run(), name=f"guild-refresh-{self.guild_id}"
        )

    async def stop(self) -> None:
        """Cancel the refresh loop and wait until it has finished."""
        self._stop_requested = True
        self._status = TaskStatus.STOPPED

        task = self._task
        if task is None or task.done():
            return

        _ = task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def is_running(self) -> bool:
        return self._status == TaskStatus.RUNNING

    async def _run(self) -> None:
        if self._stop_requested:
            return

        self._status = TaskStatus.RUNNING
        logger.info(f"Started nickname refresh for guild {self.guild_id}")
        try:
            while not self._stop_requested:
                _ = await self.tick()
                await asyncio.sleep(self.interval)
        except asyncio.CancelledError:
            logger.debug(f"Refresh task for guild {self.guild_id} was cancelled")
            raise
        finally:
            self._status = TaskStatus.STOPPED
            logger.info(f"Stopped nickname refresh for guild {self.guild_id}")

    async def tick(self) -> str | None:
        """
        Render the configured timezones and push them to the nickname.

        Returns:
            The nickname that was set, or None if this tick failed
        """
        if self._stop_requested:
            return None

        self.tick_count += 1
        try:
            settings = await self._store.load(self.guild_id)
            labels = render_labels(settings.timezones, self._clock())
        except StorageError as e:
            logger.error(f"Could not load timezones for guild {self.guild_id}: {e}")
            return None
        except Exception as e:
            logger.exception(f"Error preparing nickname for guild {self.guild_id}: {e}")
            return None

        nickname = build_nickname(labels)
        try:
            await self._client.set_display_name(self.guild_id, nickname)
        except PresenceUpdateError as e:
            logger.warning(f"Error updating nickname on guild {self.guild_id}: {e}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error updating nickname on guild {self.guild_id}: {e}")
            return None

        self.last_nickname = nickname
        logger.debug(
            f"Updated nickname for guild {self.guild_id}, timezones: {', '.join(labels)}"
        )
        return nickname
