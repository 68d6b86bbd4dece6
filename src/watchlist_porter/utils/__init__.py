"""Utility functions and classes."""

from .exceptions import (
    CatalogServiceError,
    ConfigurationError,
    FieldError,
    FileFormatError,
    SchemaValidationError,
    WatchlistPorterError,
    WatchlistStoreError,
)
from .file_formats import canonicalize_record, detect_format, parse_import_content, render_export
from .match_scoring import calculate_match_confidence
from .normalizers import (
    as_utc,
    format_timestamp,
    normalize_date,
    normalize_rating,
    normalize_status,
    parse_providers,
)
from .text_utils import normalize_title, titles_match, word_overlap

__all__ = [
    "WatchlistPorterError",
    "ConfigurationError",
    "CatalogServiceError",
    "WatchlistStoreError",
    "FileFormatError",
    "FieldError",
    "SchemaValidationError",
    "normalize_status",
    "parse_providers",
    "normalize_date",
    "normalize_rating",
    "as_utc",
    "format_timestamp",
    "calculate_match_confidence",
    "normalize_title",
    "word_overlap",
    "titles_match",
    "parse_import_content",
    "canonicalize_record",
    "detect_format",
    "render_export",
]
