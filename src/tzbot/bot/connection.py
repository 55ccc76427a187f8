"""
Connection supervision for the chat platform session.

The supervisor drives logins with a retry policy, arms the refresh registry
once a session is ready and tears it down when the session is lost. It is
the only component that sees connection errors.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from ..config.schema import ConnectionConfig
from ..utils.core.exceptions import TimezoneBotError
from .platform import ChatClient
from .refresh import RefreshRegistry

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """States of the platform session."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class RetryPolicy:
    """Delay schedule for login retries."""

    base_delay: float = 3.0
    exponential_base: float = 1.0  # 1.0 keeps the delay fixed
    max_delay: float = 60.0
    max_attempts: int | None = None  # None retries forever

    def __post_init__(self) -> None:
        """Validate retry configuration."""
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if self.exponential_base < 1:
            raise ValueError("exponential_base must be >= 1")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> "RetryPolicy":
        return cls(
            base_delay=config.retry_delay_seconds,
            exponential_base=config.backoff_multiplier,
            max_delay=config.max_retry_delay_seconds,
            max_attempts=config.max_attempts,
        )

    def delay_for(self, consecutive_failures: int) -> float:
        """Delay before the next attempt after the given number of failures."""
        if consecutive_failures <= 0:
            return 0.0
        delay = self.base_delay * (self.exponential_base ** (consecutive_failures - 1))
        return min(delay, self.max_delay)

    def allows_attempt(self, attempt: int) -> bool:
        """Whether the 1-based attempt number may still be made."""
        return self.max_attempts is None or attempt <= self.max_attempts


class ConnectionSupervisor:
    """
    Owns the connection state machine.

    ``DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED``. With
    reconnection enabled the cycle repeats after every loss; otherwise the
    first loss (or failed login) is terminal.
    """

    def __init__(
        self,
        client: ChatClient,
        registry: RefreshRegistry,
        reconnect: bool = True,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the supervisor.

        Args:
            client: Chat client to log in with
            registry: Refresh registry armed on every successful login
            reconnect: Whether to log in again after a failure or loss
            retry_policy: Delays between login attempts
            sleep: Awaitable used for retry delays
        """
        self._client: ChatClient = client
        self._registry: RefreshRegistry = registry
        self.reconnect: bool = reconnect
        self.retry_policy: RetryPolicy = retry_policy or RetryPolicy()
        self._sleep: Callable[[float], Awaitable[None]] = sleep
        self._state: ConnectionState = ConnectionState.DISCONNECTED
        self._terminated: asyncio.Event = asyncio.Event()
        self.login_attempts: int = 0
        self.sessions: int = 0

    @property
    def state(self) -> ConnectionState:
        return self._state

    def is_terminated(self) -> bool:
        return self._terminated.is_set()

    async def wait_until_terminated(self) -> None:
        """Block until the supervisor gives up on the connection."""
        _ = await self._terminated.wait()

    def _terminate(self, reason: str) -> None:
        logger.error(f"Connection supervisor stopped: {reason}")
        self._terminated.set()

    async def connect(self) -> bool:
        """
        Log in, retrying according to the policy, then start refresh tasks.

        Returns:
            True once connected, False if the supervisor gave up
        """
        if self._state != ConnectionState.DISCONNECTED:
            logger.warning(f"connect() called while {self._state.value}, ignoring")
            return self._state == ConnectionState.CONNECTED
        if self.is_terminated():
            return False

        attempt = 0
        while True:
            attempt += 1
            self.login_attempts += 1
            self._state = ConnectionState.CONNECTING
            logger.info(f"Connecting to Discord (attempt {attempt})")

            try:
                await self._client.login()
            except Exception as e:
                self._state = ConnectionState.DISCONNECTED
                logger.error(f"Error connecting to Discord: {e}")

                if isinstance(e, TimezoneBotError) and not e.recoverable:
                    self._terminate("login failed with a non-recoverable error")
                    return False
                if not self.reconnect:
                    self._terminate("login failed and reconnection is disabled")
                    return False
                if not self.retry_policy.allows_attempt(attempt + 1):
                    self._terminate(f"login failed {attempt} time(s), retry limit reached")
                    return False

                delay = self.retry_policy.delay_for(attempt)
                logger.info(f"Retrying login in {delay:.1f} seconds")
                await self._sleep(delay)
                continue

            self._state = ConnectionState.CONNECTED
            self.sessions += 1
            logger.info("Connected to Discord successfully!")
            _ = await self._registry.start_all(self._client.guild_ids())
            # A loss handled during start_all may have ended this session
            return self._state == ConnectionState.CONNECTED

    async def handle_disconnect(self) -> None:
        """Stop every refresh task and reconnect if enabled."""
        if self._state != ConnectionState.CONNECTED:
            logger.debug(f"Disconnect signalled while {self._state.value}, ignoring")
            return

        self._state = ConnectionState.DISCONNECTED
        logger.warning("Disconnected from Discord, stopping all refresh tasks")
        _ = await self._registry.stop_all()

        if self.reconnect:
            _ = await self.connect()
        else:
            self._terminate("connection lost and reconnection is disabled")
