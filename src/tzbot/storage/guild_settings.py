"""
Per-guild timezone settings on top of a key-value store.

``ConfigStore`` is the only component that knows the persisted record shape
``{"timezones": [...]}``. Absent and malformed records read as an empty
timezone list. Mutations are plain load-then-save sequences without any
atomicity guarantee; a refresh tick running concurrently may observe the
previous value until its next run.
"""

import logging
from dataclasses import dataclass, field

from ..utils.core.exceptions import StorageError
from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class GuildSettings:
    """Timezone configuration of one guild, in display order."""

    timezones: list[str] = field(default_factory=list)

    def with_timezone(self, zone_id: str) -> "GuildSettings":
        """Return settings with ``zone_id`` moved to (or appended at) the end."""
        return GuildSettings(
            [zone for zone in self.timezones if zone != zone_id] + [zone_id]
        )

    def without_timezone(self, zone_id: str) -> "GuildSettings":
        """Return settings with every occurrence of ``zone_id`` dropped."""
        return GuildSettings([zone for zone in self.timezones if zone != zone_id])

    def to_dict(self) -> dict[str, object]:
        return {"timezones": list(self.timezones)}

    @classmethod
    def from_raw(cls, raw: object) -> "GuildSettings":
        """
        Build settings from a stored value, normalizing anything unexpected.

        Args:
            raw: Value read from the store (may be None or malformed)

        Returns:
            GuildSettings, empty for absent or malformed records
        """
        if not isinstance(raw, dict):
            return cls()

        timezones = raw.get("timezones")  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        if not isinstance(timezones, list):
            return cls()

        seen: list[str] = []
        for zone in timezones:  # pyright: ignore[reportUnknownVariableType]
            if isinstance(zone, str) and zone not in seen:
                seen.append(zone)
        return cls(seen)


class ConfigStore:
    """Facade for loading and saving guild settings."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store: KeyValueStore = store

    @staticmethod
    def _key(guild_id: int) -> str:
        return str(guild_id)

    async def load(self, guild_id: int) -> GuildSettings:
        """
        Load the settings of a guild.

        Args:
            guild_id: Guild to load settings for

        Returns:
            The stored settings, or empty settings if none are stored

        Raises:
            StorageError: If the backing store fails
        """
        try:
            raw = await self._store.get(self._key(guild_id))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to load settings for guild {guild_id}: {e}",
                key=self._key(guild_id),
            ) from e

        if raw is not None and not isinstance(raw, dict):
            logger.warning(f"Malformed settings record for guild {guild_id}, using defaults")
        return GuildSettings.from_raw(raw)

    async def save(self, guild_id: int, settings: GuildSettings) -> None:
        """
        Persist the full settings record of a guild.

        Args:
            guild_id: Guild to save settings for
            settings: Settings replacing any previous record

        Raises:
            StorageError: If the backing store fails
        """
        try:
            await self._store.set(self._key(guild_id), settings.to_dict())
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to save settings for guild {guild_id}: {e}",
                key=self._key(guild_id),
            ) from e

    async def add_timezone(self, guild_id: int, zone_id: str) -> GuildSettings:
        """Upsert a zone as the most recently added entry and persist."""
        settings = (await self.load(guild_id)).with_timezone(zone_id)
        await self.save(guild_id, settings)
        return settings

    async def remove_timezone(self, guild_id: int, zone_id: str) -> bool:
        """
        Remove a zone if present and persist.

        Returns:
            True if the zone was configured, False if nothing changed
        """
        settings = await self.load(guild_id)
        if zone_id not in settings.timezones:
            return False

        await self.save(guild_id, settings.without_timezone(zone_id))
        return True

    async def reset(self, guild_id: int) -> None:
        """Replace the guild's settings with the empty default."""
        await self.save(guild_id, GuildSettings())
