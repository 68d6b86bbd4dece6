"""Configuration data models."""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.models import EXPORT_FORMAT_VERSION, DuplicateStrategy, MediaKind


class CatalogConfig(BaseModel):
    """TMDb catalog configuration."""

    api_key: str = Field(..., description="TMDb API key")
    base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDb API base URL")
    language: str = Field(default="en-US", description="Language for search results")
    timeout: int = Field(default=10, gt=0, description="Request timeout in seconds")
    include_adult: bool = Field(default=False, description="Include adult titles in searches")
    max_results: int = Field(default=10, gt=0, description="Maximum candidates per search")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URL."""
        return v.rstrip("/")


class StoreConfig(BaseModel):
    """Watchlist store configuration."""

    backend: str = Field(default="json", description="Store backend")
    path: str = Field(default="watchlist.json", description="JSON store file path")
    url: Optional[str] = Field(default=None, description="HTTP store base URL")
    api_key: Optional[str] = Field(default=None, description="HTTP store API key")
    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")
    owner_id: str = Field(default="local", min_length=1, description="Owner of the watchlist")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate store backend."""
        allowed = {"memory", "json", "http"}
        if v.lower() not in allowed:
            raise ValueError(f"Store backend must be one of: {allowed}")
        return v.lower()

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        """Expand environment variables in API key."""
        return os.path.expandvars(v) if v else v

    @model_validator(mode="after")
    def check_http_url(self) -> "StoreConfig":
        """The HTTP backend needs a URL."""
        if self.backend == "http" and not self.url:
            raise ValueError("store.url is required for the http backend")
        return self


class ImportConfig(BaseModel):
    """Import behavior configuration."""

    concurrency_limit: int = Field(
        default=5, gt=0, description="Maximum concurrent catalog searches per batch"
    )
    rating_scale: int = Field(default=10, description="Scale of ratings in import files")
    skip_unmatched: bool = Field(default=False, description="Skip rows without catalog matches")
    default_duplicate_strategy: DuplicateStrategy = Field(
        default=DuplicateStrategy.SKIP, description="Strategy for unresolved duplicates"
    )
    default_media_kind: MediaKind = Field(
        default=MediaKind.MOVIE, description="Media kind for rows without a catalog match"
    )

    @field_validator("rating_scale")
    @classmethod
    def validate_rating_scale(cls, v: int) -> int:
        """Validate rating scale."""
        allowed = {5, 10, 100}
        if v not in allowed:
            raise ValueError(f"Rating scale must be one of: {allowed}")
        return v


class ExportConfig(BaseModel):
    """Export configuration."""

    format: str = Field(default="json", description="Export file format")
    version: str = Field(default=EXPORT_FORMAT_VERSION, description="Export format version")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate export format."""
        allowed = {"json", "csv"}
        if v.lower() not in allowed:
            raise ValueError(f"Export format must be one of: {allowed}")
        return v.lower()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file: Optional[str] = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, gt=0, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Logging level must be one of: {allowed}")
        return v.upper()


class Config(BaseModel):
    """Main configuration model."""

    catalog: CatalogConfig = Field(..., description="Catalog configuration")
    store: StoreConfig = Field(default_factory=StoreConfig, description="Store configuration")
    importing: ImportConfig = Field(
        default_factory=ImportConfig, alias="import", description="Import configuration"
    )
    export: ExportConfig = Field(default_factory=ExportConfig, description="Export configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )
