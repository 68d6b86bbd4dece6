"""Export formatter service implementation."""

from datetime import datetime, timezone
from typing import Optional, Sequence

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import as_utc
from ..interfaces import IExportFormatter, IWatchlistStore
from ..models import (
    EXPORT_FORMAT_VERSION,
    MAX_NOTES_LENGTH,
    ExportedEntry,
    ExportResponse,
    WatchlistEntry,
    WatchStatus,
)


def format_entry(entry: WatchlistEntry, now: Optional[datetime] = None) -> ExportedEntry:
    """Convert a stored entry into a re-importable export record.

    Args:
        entry: Stored entry.
        now: Fallback for ``dateAdded`` when the entry has no timestamps.

    Returns:
        Export record. ``dateWatched`` is only set for completed entries.
    """
    added = entry.created_at or entry.updated_at or now or datetime.now(timezone.utc)
    watched = None
    if entry.status == WatchStatus.COMPLETED and entry.completed_at:
        watched = as_utc(entry.completed_at)

    return ExportedEntry(
        title=entry.title,
        year=entry.year,
        media_kind=entry.media_kind,
        status=entry.status,
        rating=entry.rating,
        notes=entry.notes[:MAX_NOTES_LENGTH] if entry.notes else entry.notes,
        date_added=as_utc(added),
        date_watched=watched,
        streaming_providers=entry.provider_names,
        catalog_id=entry.catalog_id,
        poster_ref=entry.poster_ref,
    )


def build_export(
    entries: Sequence[WatchlistEntry],
    owner_id: str,
    version: str = EXPORT_FORMAT_VERSION,
    exported_at: Optional[datetime] = None,
) -> ExportResponse:
    """Wrap stored entries in a versioned export envelope.

    Args:
        entries: Stored entries.
        owner_id: Owner of the watchlist.
        version: Export format version.
        exported_at: Export time, defaults to now.

    Returns:
        Export envelope.
    """
    exported_at = as_utc(exported_at or datetime.now(timezone.utc))
    exported = [format_entry(entry, exported_at) for entry in entries]

    return ExportResponse(
        exported_at=exported_at,
        owner_id=owner_id,
        version=version,
        total_entries=len(exported),
        entries=exported,
    )


class ExportFormatter(IExportFormatter, LoggerMixin):
    """Exports the stored watchlist."""

    def __init__(self, config: Config, watchlist_store: IWatchlistStore):
        """Initialize export formatter.

        Args:
            config: Application configuration.
            watchlist_store: Store to export from.
        """
        self._config = config
        self._watchlist_store = watchlist_store

    async def export_watchlist(self) -> ExportResponse:
        """Export all stored entries of the configured owner.

        Returns:
            Versioned export envelope.

        Raises:
            WatchlistStoreError: If the store cannot be read.
        """
        entries = await self._watchlist_store.list_entries()
        response = build_export(
            entries,
            owner_id=self._config.store.owner_id,
            version=self._config.export.version,
        )
        self.logger.info(f"Exported {response.total_entries} entries")
        return response
