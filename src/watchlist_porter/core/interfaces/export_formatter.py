"""Export formatter interface."""

from abc import ABC, abstractmethod

from ..models import ExportResponse


class IExportFormatter(ABC):
    """Interface for exporting the stored watchlist."""

    @abstractmethod
    async def export_watchlist(self) -> ExportResponse:
        """Export all stored entries.

        Returns:
            Versioned export envelope.

        Raises:
            WatchlistStoreError: If the store cannot be read.
        """
        pass
