"""Watchlist domain models."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class WatchStatus(str, Enum):
    """Canonical watch progress."""

    NOT_WATCHED = "not_watched"
    WATCHING = "watching"
    COMPLETED = "completed"


class MediaKind(str, Enum):
    """Kind of catalog title."""

    MOVIE = "movie"
    TV = "tv"


class StreamingProvider(BaseModel):
    """Streaming provider attached to a stored entry."""

    name: str = Field(..., min_length=1, description="Provider name")
    logo_ref: Optional[str] = Field(None, description="Opaque logo reference")


class WatchlistEntry(BaseModel):
    """A watchlist entry as kept by the store."""

    id: Optional[str] = Field(None, description="Store identifier, assigned on create")
    owner_id: Optional[str] = Field(None, description="Owner of the watchlist")
    title: str = Field(..., min_length=1, description="Display title")
    media_kind: MediaKind = Field(default=MediaKind.MOVIE, description="Movie or TV series")
    release_date: Optional[date] = Field(None, description="Release or first air date")
    catalog_id: Optional[int] = Field(None, gt=0, description="Catalog identifier")
    poster_ref: Optional[str] = Field(None, description="Opaque poster reference")
    status: WatchStatus = Field(default=WatchStatus.NOT_WATCHED, description="Watch status")
    rating: Optional[int] = Field(None, ge=0, le=10, description="User rating (0-10)")
    notes: Optional[str] = Field(None, description="User notes")
    streaming_providers: List[StreamingProvider] = Field(
        default_factory=list, description="Where the title can be streamed"
    )
    created_at: Optional[datetime] = Field(None, description="When the entry was added")
    updated_at: Optional[datetime] = Field(None, description="Last modification time")
    completed_at: Optional[datetime] = Field(None, description="When the title was finished")

    @property
    def year(self) -> Optional[int]:
        """Release year taken from the stored release date."""
        return self.release_date.year if self.release_date else None

    @property
    def provider_names(self) -> List[str]:
        """Provider names in stored order."""
        return [provider.name for provider in self.streaming_providers]
