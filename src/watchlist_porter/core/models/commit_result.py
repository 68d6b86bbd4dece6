"""Bulk import commit result models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .import_export import WireModel
from .watchlist import WatchlistEntry


class CommitStatus(str, Enum):
    """Outcome of committing a single preview item."""

    IMPORTED = "imported"
    MERGED = "merged"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"
    FAILED = "failed"


class ItemOutcome(BaseModel):
    """Result of committing one item. Exactly one status per item."""

    item_index: int = Field(..., ge=0, description="Index of the item in the request")
    title: str = Field(..., description="Item title, for error reporting")
    status: CommitStatus = Field(..., description="What happened to the item")
    entry: Optional[WatchlistEntry] = Field(None, description="Stored entry after the write")
    error: Optional[str] = Field(None, description="Failure or skip reason")

    @property
    def is_written(self) -> bool:
        """Check if the store was modified for this item."""
        return self.status in (CommitStatus.IMPORTED, CommitStatus.MERGED, CommitStatus.OVERWRITTEN)


class ImportItemError(WireModel):
    """A failed item in an import result."""

    item_index: int = Field(..., ge=0, description="Index of the failed item")
    title: str = Field(..., description="Title of the failed item")
    error: str = Field(..., description="Error message")


class ImportResult(WireModel):
    """Aggregate counts of a bulk import.

    ``merged`` and ``overwritten`` are sub-counts of ``imported``.
    """

    imported: int = Field(default=0, ge=0, description="Items written to the store")
    skipped: int = Field(default=0, ge=0, description="Items skipped")
    failed: int = Field(default=0, ge=0, description="Items that failed")
    merged: int = Field(default=0, ge=0, description="Duplicates merged")
    overwritten: int = Field(default=0, ge=0, description="Duplicates overwritten")
    errors: List[ImportItemError] = Field(default_factory=list, description="Per-item errors")

    @property
    def total_processed(self) -> int:
        """Number of items accounted for."""
        return self.imported + self.skipped + self.failed

    def add_outcome(self, outcome: ItemOutcome) -> None:
        """Fold a single item outcome into the totals."""
        if outcome.status == CommitStatus.SKIPPED:
            self.skipped += 1
        elif outcome.status == CommitStatus.FAILED:
            self.failed += 1
            self.errors.append(
                ImportItemError(
                    item_index=outcome.item_index,
                    title=outcome.title,
                    error=outcome.error or "Unknown error",
                )
            )
        else:
            self.imported += 1
            if outcome.status == CommitStatus.MERGED:
                self.merged += 1
            elif outcome.status == CommitStatus.OVERWRITTEN:
                self.overwritten += 1
