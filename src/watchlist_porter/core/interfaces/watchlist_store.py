"""Watchlist store interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import MediaKind, WatchlistEntry


class IWatchlistStore(ABC):
    """Interface for watchlist persistence."""

    @abstractmethod
    async def find_duplicate(
        self,
        catalog_id: Optional[int],
        title: str,
        year: Optional[int] = None,
        media_kind: Optional[MediaKind] = None,
    ) -> Optional[WatchlistEntry]:
        """Find a stored entry matching an incoming title.

        An entry matches on catalog id (and media kind, when given). Entries
        without a catalog id match on normalized title, and on year when both
        sides have one.

        Args:
            catalog_id: Catalog identifier of the incoming title.
            title: Incoming title.
            year: Incoming release year.
            media_kind: Incoming media kind.

        Returns:
            Matching entry or None.

        Raises:
            WatchlistStoreError: If the lookup fails.
        """
        pass

    @abstractmethod
    async def get_entry(self, entry_id: str) -> Optional[WatchlistEntry]:
        """Get an entry by id.

        Args:
            entry_id: Store identifier.

        Returns:
            Entry or None if not found.

        Raises:
            WatchlistStoreError: If the lookup fails.
        """
        pass

    @abstractmethod
    async def create_entry(self, entry: WatchlistEntry) -> WatchlistEntry:
        """Create a new entry.

        Args:
            entry: Entry to store. Its id is assigned by the store.

        Returns:
            Stored entry.

        Raises:
            WatchlistStoreError: If the write fails.
        """
        pass

    @abstractmethod
    async def update_entry(self, entry: WatchlistEntry) -> WatchlistEntry:
        """Replace an existing entry.

        Args:
            entry: Entry with the id of the record to replace.

        Returns:
            Stored entry.

        Raises:
            WatchlistStoreError: If the entry does not exist or the write fails.
        """
        pass

    @abstractmethod
    async def list_entries(self) -> List[WatchlistEntry]:
        """List all entries of the configured owner.

        Returns:
            Entries in creation order.

        Raises:
            WatchlistStoreError: If the read fails.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release store resources."""
        pass
