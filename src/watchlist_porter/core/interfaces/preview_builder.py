"""Preview builder interface."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from ..models import PreviewItem


class IPreviewBuilder(ABC):
    """Interface for turning raw import rows into preview items."""

    @abstractmethod
    async def build_preview_item(self, row: Any, skip_unmatched: bool = False) -> PreviewItem:
        """Build a preview item for one raw row.

        Never raises for row-level problems: invalid rows and failed lookups
        come back as skipped items carrying an error.

        Args:
            row: Raw row data (mapping or RawRow).
            skip_unmatched: Mark rows without catalog matches as skipped.

        Returns:
            Preview item.
        """
        pass

    @abstractmethod
    async def build_preview(
        self, rows: Sequence[Any], skip_unmatched: Optional[bool] = None
    ) -> List[PreviewItem]:
        """Build preview items for a batch of rows.

        Args:
            rows: Raw rows.
            skip_unmatched: Override for the configured skip-unmatched default.

        Returns:
            Preview items in input row order.
        """
        pass
