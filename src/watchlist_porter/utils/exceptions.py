"""Custom exceptions for the application."""

from typing import List, NamedTuple


class WatchlistPorterError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(WatchlistPorterError):
    """Configuration-related errors."""

    pass


class CatalogServiceError(WatchlistPorterError):
    """Catalog search errors."""

    pass


class WatchlistStoreError(WatchlistPorterError):
    """Watchlist store read/write errors."""

    pass


class FileFormatError(WatchlistPorterError):
    """Import file could not be read as CSV or JSON."""

    pass


class FieldError(NamedTuple):
    """A single field-level validation failure."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class SchemaValidationError(WatchlistPorterError):
    """Structural validation failure of an inbound record or request."""

    def __init__(self, model_name: str, errors: List[FieldError]) -> None:
        """Initialize validation error.

        Args:
            model_name: Name of the schema that rejected the input.
            errors: Field-level errors.
        """
        self.model_name = model_name
        self.errors = list(errors)
        details = "; ".join(str(error) for error in self.errors)
        super().__init__(f"Invalid {model_name}: {details}")
