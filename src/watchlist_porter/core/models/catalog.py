"""Catalog search result models."""

from typing import Optional

from pydantic import BaseModel, Field

from .watchlist import MediaKind


class CatalogResult(BaseModel):
    """A raw catalog search hit, before confidence scoring."""

    catalog_id: int = Field(..., gt=0, description="Catalog identifier")
    media_kind: MediaKind = Field(..., description="Movie or TV series")
    title: str = Field(..., description="Catalog title")
    year: Optional[int] = Field(None, description="Release year")
    poster_ref: Optional[str] = Field(None, description="Poster image reference")
    backdrop_ref: Optional[str] = Field(None, description="Backdrop image reference")
    overview: Optional[str] = Field(None, description="Plot overview")
