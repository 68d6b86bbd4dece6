"""Core service implementations."""

from .duplicate_resolver import (
    MERGE_POLICIES,
    entry_from_preview_item,
    merge_entry,
    overwrite_entry,
    resolve_duplicate,
)
from .export_formatter import ExportFormatter, build_export, format_entry
from .http_store import HttpWatchlistStore
from .import_committer import BulkImportCommitter
from .json_store import JsonFileWatchlistStore
from .memory_store import InMemoryWatchlistStore
from .preview_builder import PreviewBuilder
from .tmdb_catalog import TMDbCatalogService

__all__ = [
    "TMDbCatalogService",
    "InMemoryWatchlistStore",
    "JsonFileWatchlistStore",
    "HttpWatchlistStore",
    "PreviewBuilder",
    "BulkImportCommitter",
    "ExportFormatter",
    "MERGE_POLICIES",
    "entry_from_preview_item",
    "merge_entry",
    "overwrite_entry",
    "resolve_duplicate",
    "build_export",
    "format_entry",
]
