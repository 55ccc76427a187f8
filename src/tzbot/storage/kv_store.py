"""
Key-value storage backends for per-guild settings.

Two backends implement the same async ``get``/``set`` contract: a JSON file
per key on disk with atomic writes, and an in-memory dictionary used by tests
and ephemeral runs. Neither offers read-modify-write transactions.
"""

import asyncio
import json
import logging
import re
import tempfile
from pathlib import Path
from typing import Protocol

from ..utils.core.exceptions import StorageError

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Async key-value store holding JSON-compatible values."""

    async def get(self, key: str) -> object | None: ...

    async def set(self, key: str, value: object) -> None: ...


class MemoryStore:
    """In-memory key-value store."""

    def __init__(self, initial: dict[str, object] | None = None) -> None:
        self._data: dict[str, object] = dict(initial or {})

    async def get(self, key: str) -> object | None:
        value = self._data.get(key)
        # Hand out copies so callers never share state through the store
        return json.loads(json.dumps(value)) if value is not None else None

    async def set(self, key: str, value: object) -> None:
        self._data[key] = json.loads(json.dumps(value))

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """
    Key-value store keeping one JSON document per key in a directory.

    Writes go through a temporary file that replaces the target, so a crash
    never leaves a half-written record behind. File I/O runs in a worker
    thread to keep the event loop responsive.
    """

    def __init__(self, directory: Path) -> None:
        """
        Initialize the store.

        Args:
            directory: Directory holding the ``<key>.json`` files
        """
        self.directory: Path = directory
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"JsonFileStore initialized in {self.directory}")

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}", key=key)
        return self.directory / f"{key}.json"

    async def get(self, key: str) -> object | None:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The decoded JSON value, or None if nothing is stored

        Raises:
            StorageError: If the file exists but cannot be read
        """
        path = self._path_for(key)
        return await asyncio.to_thread(self._read_sync, path, key)

    async def set(self, key: str, value: object) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: JSON-serializable value

        Raises:
            StorageError: If the value cannot be serialized or written
        """
        path = self._path_for(key)
        await asyncio.to_thread(self._write_sync, path, key, value)

    @staticmethod
    def _read_sync(path: Path, key: str) -> object | None:
        if not path.exists():
            return None

        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)  # pyright: ignore[reportAny]
        except json.JSONDecodeError as e:
            # A corrupt record reads as a malformed value, not as an outage
            logger.error(f"Stored value for {key} is not valid JSON: {e}")
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}", key=key) from e

    @staticmethod
    def _write_sync(path: Path, key: str, value: object) -> None:
        temp_file = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                json.dump(value, temp_file, indent=2, ensure_ascii=False)
                temp_file.flush()
                temp_path = Path(temp_file.name)

            _ = temp_path.replace(path)
            logger.debug(f"Stored value for {key} in {path}")

        except (OSError, TypeError, ValueError) as e:
            if temp_file and Path(temp_file.name).exists():
                Path(temp_file.name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}: {e}", key=key) from e
