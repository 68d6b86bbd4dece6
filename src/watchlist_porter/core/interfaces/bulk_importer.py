"""Bulk importer interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..models import ImportResult


class IBulkImporter(ABC):
    """Interface for committing confirmed preview items to the store."""

    @abstractmethod
    async def commit(self, request: Any) -> ImportResult:
        """Commit a bulk import request.

        Args:
            request: BulkImportRequest or its wire representation.

        Returns:
            Aggregate result. Item failures are recorded, not raised.

        Raises:
            SchemaValidationError: If the request itself is malformed.
        """
        pass
