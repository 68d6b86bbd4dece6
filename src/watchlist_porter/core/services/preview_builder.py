"""Preview builder service implementation."""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import (
    SchemaValidationError,
    calculate_match_confidence,
    normalize_date,
    normalize_status,
    parse_providers,
)
from ..interfaces import ICatalogService, IPreviewBuilder, IWatchlistStore
from ..models import CatalogResult, MatchCandidate, PreviewItem, RawRow
from ..validation import validate_raw_row

NO_MATCH_ERROR = "No catalog match found"


class PreviewBuilder(IPreviewBuilder, LoggerMixin):
    """Turns raw import rows into match-annotated preview items.

    For each row:
        validate → normalize status/rating/date/providers → search catalog
        → score and rank candidates → flag unmatched rows → look up an
        existing stored entry

    Row-level failures never escape: they come back as skipped items with
    an error message.
    """

    def __init__(
        self,
        config: Config,
        catalog_service: ICatalogService,
        watchlist_store: IWatchlistStore,
    ):
        """Initialize preview builder.

        Args:
            config: Application configuration.
            catalog_service: Catalog search service.
            watchlist_store: Store used for duplicate lookups.
        """
        self._config = config
        self._catalog_service = catalog_service
        self._watchlist_store = watchlist_store

    async def build_preview(
        self, rows: Sequence[Any], skip_unmatched: Optional[bool] = None
    ) -> List[PreviewItem]:
        """Build preview items for a batch of rows.

        Catalog lookups run concurrently up to ``importing.concurrency_limit``;
        the result keeps input row order.

        Args:
            rows: Raw rows.
            skip_unmatched: Override for the configured skip-unmatched default.

        Returns:
            Preview items in input row order.
        """
        if skip_unmatched is None:
            skip_unmatched = self._config.importing.skip_unmatched

        semaphore = asyncio.Semaphore(self._config.importing.concurrency_limit)

        async def build_one(row: Any) -> PreviewItem:
            async with semaphore:
                return await self.build_preview_item(row, skip_unmatched=skip_unmatched)

        self.logger.info(f"Building preview for {len(rows)} row(s)")
        items = list(await asyncio.gather(*(build_one(row) for row in rows)))

        skipped = sum(1 for item in items if item.should_skip)
        duplicates = sum(1 for item in items if item.has_existing_entry)
        unmatched = sum(1 for item in items if not item.match_candidates)
        self.logger.info(
            f"Preview ready: {len(items)} item(s), {skipped} skipped, "
            f"{duplicates} duplicate(s), {unmatched} without matches"
        )
        return items

    async def build_preview_item(self, row: Any, skip_unmatched: bool = False) -> PreviewItem:
        """Build a preview item for one raw row.

        Args:
            row: Raw row data (mapping or RawRow).
            skip_unmatched: Mark rows without catalog matches as skipped.

        Returns:
            Preview item. Invalid rows and failed lookups are returned with
            ``should_skip`` set and ``error`` populated.
        """
        try:
            raw = validate_raw_row(row)
        except SchemaValidationError as e:
            self.logger.debug(f"Rejected import row: {e}")
            return self._invalid_row_item(row, str(e))

        try:
            fields = self._normalized_fields(raw)
            results = await self._catalog_service.search(raw.title, raw.year)
            candidates = self.rank_candidates(raw, results)

            if not candidates and skip_unmatched:
                return PreviewItem(**fields, should_skip=True, error=NO_MATCH_ERROR)

            existing_id = await self._find_existing_entry_id(raw, candidates)
            return PreviewItem(
                **fields,
                match_candidates=candidates,
                has_existing_entry=existing_id is not None,
                existing_entry_id=existing_id,
            )

        except Exception as e:
            self.logger.warning(f"Lookup failed for '{raw.title}': {e}")
            # Only fields that passed row validation, so this item always builds
            return PreviewItem(
                original_title=raw.title,
                original_year=raw.year,
                should_skip=True,
                error=f"Lookup failed: {e}",
            )

    def rank_candidates(
        self, raw: RawRow, results: Sequence[CatalogResult]
    ) -> List[MatchCandidate]:
        """Score catalog results against a row and order them best first.

        Ties keep catalog order.

        Args:
            raw: Validated row.
            results: Raw catalog results.

        Returns:
            Scored candidates, highest confidence first.
        """
        candidates = [
            MatchCandidate(
                **result.model_dump(),
                confidence=calculate_match_confidence(
                    result.title,
                    result.year,
                    raw.title,
                    raw.year,
                    has_poster=bool(result.poster_ref),
                ),
            )
            for result in results
        ]
        return sorted(candidates, key=lambda c: c.confidence, reverse=True)

    def _normalized_fields(self, raw: RawRow) -> Dict[str, Any]:
        """Normalize the loosely typed row fields."""
        return {
            "original_title": raw.title,
            "original_year": raw.year,
            "suggested_status": normalize_status(raw.status),
            "rating": raw.rating,
            "notes": raw.notes,
            "date_added": normalize_date(raw.date_added),
            "streaming_providers": parse_providers(raw.streaming_providers),
        }

    async def _find_existing_entry_id(
        self, raw: RawRow, candidates: List[MatchCandidate]
    ) -> Optional[str]:
        """Look up a stored entry for the best candidate, else the row title."""
        top = candidates[0] if candidates else None

        if top is not None:
            existing = await self._watchlist_store.find_duplicate(
                top.catalog_id, raw.title, raw.year or top.year, top.media_kind
            )
        else:
            existing = await self._watchlist_store.find_duplicate(None, raw.title, raw.year)

        if existing is None:
            return None

        self.logger.debug(f"'{raw.title}' already on the watchlist as {existing.id}")
        return existing.id

    def _invalid_row_item(self, row: Any, error: str) -> PreviewItem:
        """Build a skipped item for a row that failed validation."""
        title = ""
        year = None
        if isinstance(row, dict):
            raw_title = row.get("title")
            title = raw_title.strip() if isinstance(raw_title, str) else str(raw_title or "")
            raw_year = row.get("year")
            if isinstance(raw_year, int) and not isinstance(raw_year, bool):
                year = raw_year

        return PreviewItem(original_title=title, original_year=year, should_skip=True, error=error)
