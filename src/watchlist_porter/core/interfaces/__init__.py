"""Core interfaces for dependency injection."""

from .bulk_importer import IBulkImporter
from .catalog_service import ICatalogService
from .export_formatter import IExportFormatter
from .preview_builder import IPreviewBuilder
from .watchlist_store import IWatchlistStore

__all__ = [
    "ICatalogService",
    "IWatchlistStore",
    "IPreviewBuilder",
    "IBulkImporter",
    "IExportFormatter",
]
