"""Catalog service interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import CatalogResult


class ICatalogService(ABC):
    """Interface for media catalog search."""

    @abstractmethod
    async def search(self, title: str, year: Optional[int] = None) -> List[CatalogResult]:
        """Search the catalog for movies and TV series.

        Args:
            title: Title to search for.
            year: Release year hint.

        Returns:
            Raw catalog results in catalog order. Confidence is not scored here.

        Raises:
            CatalogServiceError: If the search fails.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        pass
