"""
Inbound event dispatch.

The chat client publishes platform events into one queue per category.
Each queue is drained by a single consumer, so events of a category are
handled strictly in order: lifecycle events (guild join/leave, connection
loss) never interleave with each other, which keeps every mutation of the
refresh registry serialized. Messages are handled independently of
lifecycle events.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from .commands import CommandRouter
from .connection import ConnectionState, ConnectionSupervisor
from .refresh import RefreshRegistry
from .types import InboundMessage

logger = logging.getLogger(__name__)


class EventCategory(Enum):
    """Categories of inbound events, one queue each."""

    LIFECYCLE = "lifecycle"
    MESSAGES = "messages"


@dataclass(frozen=True)
class MessageReceived:
    message: InboundMessage


@dataclass(frozen=True)
class GuildJoined:
    guild_id: int


@dataclass(frozen=True)
class GuildLeft:
    guild_id: int


@dataclass(frozen=True)
class ConnectionLost:
    reason: str | None = None


Event = MessageReceived | GuildJoined | GuildLeft | ConnectionLost


def categorize(event: Event) -> EventCategory:
    """Return the queue an event belongs to."""
    if isinstance(event, MessageReceived):
        return EventCategory.MESSAGES
    return EventCategory.LIFECYCLE


class EventDispatcher:
    """Routes inbound events to the command router, registry and supervisor."""

    def __init__(
        self,
        router: CommandRouter,
        registry: RefreshRegistry,
        supervisor: ConnectionSupervisor,
    ) -> None:
        self._router: CommandRouter = router
        self._registry: RefreshRegistry = registry
        self._supervisor: ConnectionSupervisor = supervisor
        self._queues: dict[EventCategory, asyncio.Queue[Event]] = {
            category: asyncio.Queue() for category in EventCategory
        }
        self._consumers: dict[EventCategory, asyncio.Task[None]] = {}

    def publish(self, event: Event) -> None:
        """Queue an event for its category's consumer."""
        self._queues[categorize(event)].put_nowait(event)

    def is_running(self) -> bool:
        return bool(self._consumers) and not all(
            task.done() for task in self._consumers.values()
        )

    def start(self) -> None:
        """Start one consumer task per category."""
        if self._consumers:
            logger.warning("Event dispatcher already started")
            return

        for category in EventCategory:
            self._consumers[category] = asyncio.create_task(
                self._consume(category), name=f"dispatch-{category.value}"
            )
        logger.debug("Event dispatcher started")

    async def stop(self) -> None:
        """Cancel all consumers and wait for them to finish."""
        consumers = list(self._consumers.values())
        self._consumers.clear()
        for task in consumers:
            if not task.done():
                _ = task.cancel()

        if consumers:
            _ = await asyncio.gather(*consumers, return_exceptions=True)
        logger.debug("Event dispatcher stopped")

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        for queue in self._queues.values():
            await queue.join()

    async def _consume(self, category: EventCategory) -> None:
        queue = self._queues[category]
        while True:
            event = await queue.get()
            try:
                await self.dispatch(event)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"Unhandled error dispatching {event!r}: {e}")
            finally:
                queue.task_done()

    async def dispatch(self, event: Event) -> None:
        """Handle a single event immediately."""
        match event:
            case MessageReceived(message=message):
                _ = await self._router.handle_message(message)
            case GuildJoined(guild_id=guild_id):
                if self._supervisor.state != ConnectionState.CONNECTED:
                    logger.debug(f"Ignoring join of guild {guild_id} while not connected")
                    return
                logger.info(f"Joined guild {guild_id}")
                _ = await self._registry.start(guild_id)
            case GuildLeft(guild_id=guild_id):
                logger.info(f"Left guild {guild_id}")
                _ = await self._registry.stop(guild_id)
            case ConnectionLost(reason=reason):
                logger.warning(f"Connection lost: {reason or 'no reason given'}")
                await self._supervisor.handle_disconnect()
