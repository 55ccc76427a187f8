"""
Per-guild cooldown for the timezone overview command.
"""

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class OverviewCooldown:
    """
    Debounces repeated overview requests per guild.

    A cooldown of zero seconds disables the check entirely.
    """

    def __init__(
        self,
        cooldown_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.cooldown_seconds: float = cooldown_seconds
        self._clock: Callable[[], float] = clock
        self._last_used: dict[int, float] = {}

    @property
    def enabled(self) -> bool:
        return self.cooldown_seconds > 0

    def try_acquire(self, guild_id: int) -> bool:
        """
        Record an overview request if the guild is not cooling down.

        Args:
            guild_id: Guild requesting the overview

        Returns:
            True if the request may be answered
        """
        if not self.enabled:
            return True

        now = self._clock()
        last = self._last_used.get(guild_id)
        if last is not None and now - last < self.cooldown_seconds:
            logger.debug(
                f"Overview for guild {guild_id} on cooldown "
                + f"({self.cooldown_seconds - (now - last):.1f}s left)"
            )
            return False

        self._last_used[guild_id] = now
        return True

    def reset(self, guild_id: int | None = None) -> None:
        """Clear the cooldown of one guild, or of all guilds."""
        if guild_id is None:
            self._last_used.clear()
        else:
            _ = self._last_used.pop(guild_id, None)
