"""Core data models."""

from .catalog import CatalogResult
from .commit_result import CommitStatus, ImportItemError, ImportResult, ItemOutcome
from .import_export import (
    EXPORT_FORMAT_VERSION,
    MAX_NOTES_LENGTH,
    BulkImportRequest,
    DuplicateResolution,
    DuplicateStrategy,
    ExportedEntry,
    ExportResponse,
    MatchCandidate,
    MergeFields,
    NotesPolicy,
    PreviewItem,
    ProvidersPolicy,
    RawRow,
)
from .watchlist import MediaKind, StreamingProvider, WatchlistEntry, WatchStatus

__all__ = [
    "WatchStatus",
    "MediaKind",
    "StreamingProvider",
    "WatchlistEntry",
    "CatalogResult",
    "RawRow",
    "MatchCandidate",
    "PreviewItem",
    "DuplicateStrategy",
    "NotesPolicy",
    "ProvidersPolicy",
    "MergeFields",
    "DuplicateResolution",
    "BulkImportRequest",
    "ExportedEntry",
    "ExportResponse",
    "EXPORT_FORMAT_VERSION",
    "MAX_NOTES_LENGTH",
    "CommitStatus",
    "ItemOutcome",
    "ImportItemError",
    "ImportResult",
]
