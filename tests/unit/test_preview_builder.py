"""Test preview building."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from watchlist_porter.core.models import MediaKind, PreviewItem, WatchlistEntry, WatchStatus
from watchlist_porter.core.services import PreviewBuilder
from watchlist_porter.core.services.preview_builder import NO_MATCH_ERROR
from watchlist_porter.utils import WatchlistStoreError

from ..conftest import FakeCatalogService, INCEPTION


class SlowCatalogService(FakeCatalogService):
    """Fake catalog that records how many searches overlap."""

    def __init__(self):
        super().__init__()
        self.active = 0
        self.max_active = 0

    async def search(self, title, year=None):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0.01)
            return await super().search(title, year)
        finally:
            self.active -= 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_normalizes_and_matches_row(preview_builder):
    """Test that a messy row becomes a normalized, matched preview item."""
    item = await preview_builder.build_preview_item(
        {
            "title": "Breaking Bad",
            "status": "in progress",
            "rating": 9,
            "dateAdded": "01/15/2024",
            "streamingProviders": "Netflix; Hulu",
        }
    )

    assert isinstance(item, PreviewItem)
    assert item.original_title == "Breaking Bad"
    assert item.suggested_status == WatchStatus.WATCHING
    assert item.rating == 9
    assert item.date_added == datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert item.streaming_providers == ["netflix", "hulu"]
    assert item.match_candidates[0].catalog_id == 1396
    assert item.match_candidates[0].media_kind == MediaKind.TV
    assert item.match_candidates[0].confidence > 0.7
    assert item.has_existing_entry is False
    assert item.should_skip is False
    assert item.error is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_ranks_candidates_by_confidence(preview_builder, fake_catalog):
    """Test that candidates are reordered best first."""
    item = await preview_builder.build_preview_item({"title": "Matrix", "year": 1999})

    assert [c.catalog_id for c in item.match_candidates] == [603, 604]
    assert item.match_candidates[0].confidence > item.match_candidates[1].confidence
    assert fake_catalog.calls == [("Matrix", 1999)]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_invalid_row_is_skipped_with_error(preview_builder, fake_catalog):
    """Test that invalid rows never reach the catalog."""
    item = await preview_builder.build_preview_item({"title": "", "year": 2010, "rating": 99})

    assert item.should_skip is True
    assert item.original_title == ""
    assert item.original_year == 2010
    assert "title" in item.error
    assert "rating" in item.error
    assert item.match_candidates == []
    assert fake_catalog.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_non_object_row_is_skipped(preview_builder):
    """Test that a row that is not an object is reported, not raised."""
    item = await preview_builder.build_preview_item("just a string")

    assert item.should_skip is True
    assert item.original_title == ""
    assert item.error.startswith("Invalid RawRow")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_catalog_failure_is_contained(preview_builder, fake_catalog):
    """Test that a failed lookup skips only that row."""
    fake_catalog.failing_titles.add("inception")

    items = await preview_builder.build_preview([{"title": "Inception"}, {"title": "Breaking Bad"}])

    assert items[0].should_skip is True
    assert items[0].error.startswith("Lookup failed:")
    assert items[1].should_skip is False
    assert items[1].match_candidates[0].catalog_id == 1396


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_unmatched_row_is_kept_by_default(preview_builder):
    """Test that rows without matches are kept unless asked otherwise."""
    item = await preview_builder.build_preview_item({"title": "Some Home Video"})

    assert item.match_candidates == []
    assert item.should_skip is False
    assert item.error is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_unmatched_row_skipped_when_requested(preview_builder):
    """Test skip-unmatched marks rows without matches."""
    items = await preview_builder.build_preview(
        [{"title": "Some Home Video"}, {"title": "Inception"}], skip_unmatched=True
    )

    assert items[0].should_skip is True
    assert items[0].error == NO_MATCH_ERROR
    assert items[1].should_skip is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_flags_existing_entry(preview_builder, memory_store, stored_entry):
    """Test that a title already on the watchlist is flagged."""
    stored = await memory_store.create_entry(stored_entry)

    item = await preview_builder.build_preview_item({"title": "inception", "year": 2010})

    assert item.has_existing_entry is True
    assert item.existing_entry_id == stored.id
    assert item.match_candidates[0].catalog_id == INCEPTION.catalog_id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_flags_existing_entry_by_title_without_match(preview_builder, memory_store):
    """Test title-based duplicate detection for rows without catalog matches."""
    stored = await memory_store.create_entry(WatchlistEntry(title="Some Home Video"))

    item = await preview_builder.build_preview_item({"title": "Some home video!"})

    assert item.match_candidates == []
    assert item.has_existing_entry is True
    assert item.existing_entry_id == stored.id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_store_failure_is_contained(config, fake_catalog):
    """Test that a failing duplicate lookup skips the row."""
    store = AsyncMock()
    store.find_duplicate.side_effect = WatchlistStoreError("store unavailable")
    builder = PreviewBuilder(config, fake_catalog, store)

    item = await builder.build_preview_item({"title": "Inception"})

    assert item.should_skip is True
    assert item.error == "Lookup failed: store unavailable"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_keeps_input_order_and_limits_concurrency(config, memory_store):
    """Test ordering and the concurrency limit."""
    catalog = SlowCatalogService()
    titles = [f"Title {i}" for i in range(10)]
    builder = PreviewBuilder(config, catalog, memory_store)

    items = await builder.build_preview([{"title": title} for title in titles])

    assert [item.original_title for item in items] == titles
    assert 1 <= catalog.max_active <= config.importing.concurrency_limit


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_empty_batch(preview_builder):
    """Test that an empty batch yields no items."""
    assert await preview_builder.build_preview([]) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_extreme_dates_do_not_abort_batch(preview_builder):
    """Test that edge-of-range dates are normalized or dropped per row."""
    items = await preview_builder.build_preview(
        [
            {"title": "Inception"},
            {"title": "Breaking Bad", "dateAdded": "0999-01-01"},
            {"title": "The Matrix", "dateAdded": "0001-01-01T00:00:00+01:00"},
        ]
    )

    assert len(items) == 3
    assert not any(item.should_skip for item in items)
    assert items[1].date_added == datetime(999, 1, 1, tzinfo=timezone.utc)
    assert items[2].date_added is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preview_unbuildable_row_is_skipped(preview_builder):
    """Test that a row whose normalized fields fail validation is skipped alone."""
    with patch(
        "watchlist_porter.core.services.preview_builder.normalize_date",
        side_effect=lambda raw: "not-a-timestamp" if raw else None,
    ):
        items = await preview_builder.build_preview(
            [{"title": "Inception"}, {"title": "Breaking Bad", "dateAdded": "2024-01-15"}]
        )

    assert items[0].should_skip is False
    assert items[0].match_candidates[0].catalog_id == 27205
    assert items[1].should_skip is True
    assert items[1].original_title == "Breaking Bad"
    assert items[1].date_added is None
    assert items[1].error.startswith("Lookup failed:")
