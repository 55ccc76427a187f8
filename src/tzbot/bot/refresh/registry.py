"""
Registry of running guild refresh tasks.

``RefreshRegistry`` owns the mapping from guild id to ``GuildRefreshTask``
and is the only code that mutates it. It guarantees at most one live task
per guild across guild joins and leaves and across connection loss and
reconnection.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ...storage import ConfigStore
from ...utils.time import get_utc_now
from ..platform import ChatClient
from .task import GuildRefreshTask
from .types import DEFAULT_REFRESH_INTERVAL

logger = logging.getLogger(__name__)


class RefreshRegistry:
    """Starts, stops and tracks one refresh task per guild."""

    def __init__(
        self,
        client: ChatClient,
        store: ConfigStore,
        interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], datetime] = get_utc_now,
    ) -> None:
        """
        Initialize the registry.

        Args:
            client: Chat client handed to every task
            store: Settings store handed to every task
            interval: Refresh interval in seconds for new tasks
            clock: Source of the instant rendered by new tasks
        """
        self._client: ChatClient = client
        self._store: ConfigStore = store
        self._interval: float = interval
        self._clock: Callable[[], datetime] = clock
        self._tasks: dict[int, GuildRefreshTask] = {}
        # Guilds whose membership lookup is in flight
        self._pending: set[int] = set()
        # Bumped by stop_all(); starts begun under an older value are dropped
        self._generation: int = 0

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    async def start(self, guild_id: int) -> bool:
        """
        Start the refresh task of a guild unless it is already running.

        Args:
            guild_id: Guild to start refreshing

        Returns:
            True if a new task was started
        """
        if guild_id in self._tasks or guild_id in self._pending:
            logger.debug(f"Refresh task for guild {guild_id} already exists")
            return False

        generation = self._generation
        self._pending.add(guild_id)
        try:
            is_member = await self._client.has_self_member(guild_id)
        except Exception as e:
            logger.error(f"Could not resolve own membership in guild {guild_id}: {e}")
            is_member = False

        if generation != self._generation:
            logger.debug(f"Start of guild {guild_id} was dropped, all tasks were stopped meanwhile")
            return False
        if guild_id not in self._pending:
            # stop() or stop_all() ran while the lookup was in flight
            logger.debug(f"Start of guild {guild_id} was cancelled while resolving membership")
            return False
        self._pending.discard(guild_id)

        if not is_member:
            logger.warning(f"Bot is not a member of guild {guild_id}, skipping refresh task")
            return False

        task = GuildRefreshTask(
            guild_id,
            self._store,
            self._client,
            interval=self._interval,
            clock=self._clock,
        )
        self._tasks[guild_id] = task
        task.start()
        return True

    async def start_all(self, guild_ids: Iterable[int]) -> int:
        """
        Start refresh tasks for every given guild.

        Args:
            guild_ids: Guilds the bot currently belongs to

        Returns:
            Number of tasks started
        """
        generation = self._generation
        started = 0
        for guild_id in guild_ids:
            if generation != self._generation:
                logger.info("All refresh tasks were stopped, abandoning remaining starts")
                break
            if await self.start(guild_id):
                started += 1

        logger.info(f"Started {started} refresh task(s), {len(self._tasks)} active")
        return started

    async def stop(self, guild_id: int) -> bool:
        """
        Stop and forget the refresh task of a guild.

        Args:
            guild_id: Guild to stop refreshing

        Returns:
            True if a task was stopped
        """
        self._pending.discard(guild_id)
        task = self._tasks.pop(guild_id, None)
        if task is None:
            logger.debug(f"No refresh task for guild {guild_id}")
            return False

        await task.stop()
        return True

    async def stop_all(self) -> int:
        """
        Stop every refresh task.

        Returns:
            Number of tasks stopped
        """
        self._generation += 1
        self._pending.clear()
        tasks = list(self._tasks.values())
        self._tasks.clear()

        if tasks:
            logger.info(f"Stopping {len(tasks)} refresh task(s)")
            results = await asyncio.gather(
                *(task.stop() for task in tasks), return_exceptions=True
            )
            for task, result in zip(tasks, results):
                if isinstance(result, Exception):
                    logger.error(f"Error stopping refresh task for guild {task.guild_id}: {result}")

        return len(tasks)

    def active_guild_ids(self) -> list[int]:
        return list(self._tasks)

    def get_task(self, guild_id: int) -> GuildRefreshTask | None:
        return self._tasks.get(guild_id)

    def get_status(self) -> dict[int, dict[str, str | int | None]]:
        """Get status of all registered refresh tasks."""
        return {
            guild_id: {
                "status": task.status.value,
                "ticks": task.tick_count,
                "last_nickname": task.last_nickname,
            }
            for guild_id, task in self._tasks.items()
        }
