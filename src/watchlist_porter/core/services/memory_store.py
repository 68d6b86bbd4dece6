"""In-memory watchlist store."""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import WatchlistStoreError, titles_match
from ..interfaces import IWatchlistStore
from ..models import MediaKind, WatchlistEntry


def entry_matches(
    entry: WatchlistEntry,
    catalog_id: Optional[int],
    title: str,
    year: Optional[int] = None,
    media_kind: Optional[MediaKind] = None,
) -> bool:
    """Check whether a stored entry is a duplicate of an incoming title.

    Args:
        entry: Stored entry.
        catalog_id: Catalog identifier of the incoming title.
        title: Incoming title.
        year: Incoming release year.
        media_kind: Incoming media kind.

    Returns:
        True if the entry matches.
    """
    if catalog_id is not None and entry.catalog_id is not None:
        if entry.catalog_id != catalog_id:
            return False
        return media_kind is None or entry.media_kind == media_kind

    if not titles_match(entry.title, title):
        return False
    if year and entry.year:
        return entry.year == year
    return True


class InMemoryWatchlistStore(IWatchlistStore, LoggerMixin):
    """Watchlist store that keeps entries in process memory."""

    def __init__(self, config: Config) -> None:
        """Initialize in-memory store.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._owner_id = config.store.owner_id
        self._entries: Dict[str, WatchlistEntry] = {}

    async def find_duplicate(
        self,
        catalog_id: Optional[int],
        title: str,
        year: Optional[int] = None,
        media_kind: Optional[MediaKind] = None,
    ) -> Optional[WatchlistEntry]:
        """Find a stored entry matching an incoming title."""
        entries = await self.list_entries()

        # Catalog id matches win over title matches
        if catalog_id is not None:
            for entry in entries:
                if entry.catalog_id == catalog_id and entry_matches(
                    entry, catalog_id, title, year, media_kind
                ):
                    return entry

        for entry in entries:
            if entry_matches(entry, catalog_id, title, year, media_kind):
                return entry
        return None

    async def get_entry(self, entry_id: str) -> Optional[WatchlistEntry]:
        """Get an entry by id."""
        await self._ensure_loaded()
        entry = self._entries.get(entry_id)
        return entry.model_copy(deep=True) if entry else None

    async def create_entry(self, entry: WatchlistEntry) -> WatchlistEntry:
        """Create a new entry with a fresh id."""
        await self._ensure_loaded()
        now = datetime.now(timezone.utc)
        stored = entry.model_copy(
            deep=True,
            update={
                "id": uuid.uuid4().hex,
                "owner_id": self._owner_id,
                "created_at": entry.created_at or now,
                "updated_at": now,
            },
        )
        await self._put(stored)

        self.logger.debug(f"Created entry {stored.id} for '{stored.title}'")
        return stored.model_copy(deep=True)

    async def update_entry(self, entry: WatchlistEntry) -> WatchlistEntry:
        """Replace an existing entry."""
        await self._ensure_loaded()
        if not entry.id or entry.id not in self._entries:
            raise WatchlistStoreError(f"Watchlist entry not found: {entry.id}")

        existing = self._entries[entry.id]
        stored = entry.model_copy(
            deep=True,
            update={
                "owner_id": existing.owner_id,
                "created_at": existing.created_at,
                "updated_at": datetime.now(timezone.utc),
            },
        )
        await self._put(stored)

        self.logger.debug(f"Updated entry {stored.id} for '{stored.title}'")
        return stored.model_copy(deep=True)

    async def list_entries(self) -> List[WatchlistEntry]:
        """List entries of the configured owner in creation order."""
        await self._ensure_loaded()
        return [
            entry.model_copy(deep=True)
            for entry in self._entries.values()
            if entry.owner_id in (None, self._owner_id)
        ]

    async def close(self) -> None:
        """Nothing to release."""
        pass

    async def _put(self, entry: WatchlistEntry) -> None:
        """Store an entry, restoring the previous state if persisting fails."""
        previous = self._entries.get(entry.id)
        self._entries[entry.id] = entry
        try:
            await self._persist()
        except WatchlistStoreError:
            if previous is None:
                del self._entries[entry.id]
            else:
                self._entries[entry.id] = previous
            raise

    async def _ensure_loaded(self) -> None:
        """Hook for stores backed by persistent storage."""
        pass

    async def _persist(self) -> None:
        """Hook for stores backed by persistent storage."""
        pass
