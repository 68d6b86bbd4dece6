"""Bulk import committer service implementation."""

from typing import Any, List, Optional, Tuple

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ..interfaces import IBulkImporter, IWatchlistStore
from ..models import (
    BulkImportRequest,
    CommitStatus,
    DuplicateResolution,
    DuplicateStrategy,
    ImportResult,
    ItemOutcome,
    PreviewItem,
    WatchlistEntry,
)
from ..validation import validate_bulk_import_request
from .duplicate_resolver import entry_from_preview_item, resolve_duplicate
from .preview_builder import NO_MATCH_ERROR

_STRATEGY_STATUS = {
    DuplicateStrategy.MERGE: CommitStatus.MERGED,
    DuplicateStrategy.OVERWRITE: CommitStatus.OVERWRITTEN,
}


class BulkImportCommitter(IBulkImporter, LoggerMixin):
    """Applies confirmed preview items to the watchlist store.

    Items are processed one at a time, in order. A failing item is recorded
    and the batch carries on; nothing already written is rolled back.
    """

    def __init__(self, config: Config, watchlist_store: IWatchlistStore):
        """Initialize committer.

        Args:
            config: Application configuration.
            watchlist_store: Store to write to.
        """
        self._config = config
        self._watchlist_store = watchlist_store

    async def commit(self, request: Any) -> ImportResult:
        """Commit a bulk import request.

        Args:
            request: BulkImportRequest or its wire representation.

        Returns:
            Aggregate result. Item failures are recorded, not raised.

        Raises:
            SchemaValidationError: If the request itself is malformed.
        """
        result, _ = await self.commit_detailed(request)
        return result

    async def commit_detailed(self, request: Any) -> Tuple[ImportResult, List[ItemOutcome]]:
        """Commit a bulk import request and report every item's outcome.

        Args:
            request: BulkImportRequest or its wire representation.

        Returns:
            Tuple of (aggregate result, one outcome per item in order).

        Raises:
            SchemaValidationError: If the request itself is malformed.
        """
        request = validate_bulk_import_request(request)

        self.logger.info(f"Committing {len(request.items)} item(s)")
        result = ImportResult()
        outcomes = []

        for index, item in enumerate(request.items):
            outcome = await self.process_item(index, item, request)
            result.add_outcome(outcome)
            outcomes.append(outcome)

        self.logger.info(
            f"Import finished: {result.imported} imported ({result.merged} merged, "
            f"{result.overwritten} overwritten), {result.skipped} skipped, {result.failed} failed"
        )
        return result, outcomes

    async def process_item(
        self, index: int, item: PreviewItem, request: BulkImportRequest
    ) -> ItemOutcome:
        """Commit a single item.

        Args:
            index: Position of the item in the request.
            item: Preview item.
            request: Request the item belongs to.

        Returns:
            Outcome of the item. Never raises.
        """
        title = item.original_title

        if item.should_skip:
            return ItemOutcome(
                item_index=index, title=title, status=CommitStatus.SKIPPED, error=item.error
            )

        if not item.match_candidates and request.skip_unmatched:
            return ItemOutcome(
                item_index=index, title=title, status=CommitStatus.SKIPPED, error=NO_MATCH_ERROR
            )

        try:
            resolution = request.resolution_for(index)

            if item.has_existing_entry:
                if resolution.strategy == DuplicateStrategy.SKIP:
                    return self._skipped_duplicate(index, item, item.existing_entry_id)

                existing = await self._watchlist_store.get_entry(item.existing_entry_id)
                if existing is None:
                    return ItemOutcome(
                        item_index=index,
                        title=title,
                        status=CommitStatus.FAILED,
                        error=f"Existing entry not found: {item.existing_entry_id}",
                    )
                return await self._apply_resolution(index, item, existing, resolution)

            # The store may have changed since the preview was built
            candidate = item.selected_candidate
            duplicate = await self._watchlist_store.find_duplicate(
                candidate.catalog_id if candidate else None,
                title,
                item.original_year or (candidate.year if candidate else None),
                candidate.media_kind if candidate else None,
            )
            if duplicate is not None:
                self.logger.debug(f"'{title}' is already on the watchlist as {duplicate.id}")
                return await self._apply_resolution(index, item, duplicate, resolution)

            entry = entry_from_preview_item(item, self._config.importing.default_media_kind)
            stored = await self._watchlist_store.create_entry(entry)
            self.logger.debug(f"Imported '{stored.title}' as {stored.id}")
            return ItemOutcome(
                item_index=index, title=title, status=CommitStatus.IMPORTED, entry=stored
            )

        except Exception as e:
            self.logger.warning(f"Failed to import item {index} '{title}': {e}")
            return ItemOutcome(
                item_index=index, title=title, status=CommitStatus.FAILED, error=str(e)
            )

    async def _apply_resolution(
        self,
        index: int,
        item: PreviewItem,
        existing: WatchlistEntry,
        resolution: DuplicateResolution,
    ) -> ItemOutcome:
        """Resolve a duplicate and write the result."""
        if resolution.strategy == DuplicateStrategy.SKIP:
            return self._skipped_duplicate(index, item, existing.id)

        resolved = resolve_duplicate(existing, item, resolution)
        stored = await self._watchlist_store.update_entry(resolved)
        return ItemOutcome(
            item_index=index,
            title=item.original_title,
            status=_STRATEGY_STATUS[resolution.strategy],
            entry=stored,
        )

    @staticmethod
    def _skipped_duplicate(index: int, item: PreviewItem, entry_id: Optional[str]) -> ItemOutcome:
        return ItemOutcome(
            item_index=index,
            title=item.original_title,
            status=CommitStatus.SKIPPED,
            error=f"Already on watchlist as {entry_id}",
        )
