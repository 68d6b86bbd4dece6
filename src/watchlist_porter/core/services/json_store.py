"""JSON file watchlist store."""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ...config.models import Config
from ...utils import WatchlistStoreError
from ..models import WatchlistEntry
from .memory_store import InMemoryWatchlistStore

STORE_FILE_VERSION = 1


class JsonFileWatchlistStore(InMemoryWatchlistStore):
    """Watchlist store persisted to a local JSON file.

    The file is read on first access and rewritten after every write via a
    temporary file, so a crash never leaves a half-written store behind.
    """

    def __init__(self, config: Config) -> None:
        """Initialize JSON file store.

        Args:
            config: Application configuration.
        """
        super().__init__(config)
        self._path = Path(config.store.path).expanduser()
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Store file path."""
        return self._path

    async def _ensure_loaded(self) -> None:
        """Read the store file once."""
        if self._loaded:
            return

        async with self._lock:
            if self._loaded:
                return

            if self._path.exists():
                self._entries = await self._read_entries()
                self.logger.debug(f"Loaded {len(self._entries)} entries from {self._path}")
            self._loaded = True

    async def _read_entries(self) -> Dict[str, WatchlistEntry]:
        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            raise WatchlistStoreError(f"Failed to read store file {self._path}: {e}") from e

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
            raw_entries: List[Any] = data.get("entries", []) if isinstance(data, dict) else data
            entries = [WatchlistEntry.model_validate(raw) for raw in raw_entries]
        except (ValueError, ValidationError) as e:
            raise WatchlistStoreError(f"Corrupt store file {self._path}: {e}") from e

        return {entry.id: entry for entry in entries if entry.id}

    async def _persist(self) -> None:
        """Write all entries back to the store file."""
        payload = {
            "version": STORE_FILE_VERSION,
            "entries": [entry.model_dump(mode="json") for entry in self._entries.values()],
        }
        content = json.dumps(payload, indent=2, ensure_ascii=False)
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")

        async with self._lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                    await f.write(content)
                await aiofiles.os.replace(tmp_path, self._path)
            except OSError as e:
                raise WatchlistStoreError(f"Failed to write store file {self._path}: {e}") from e
