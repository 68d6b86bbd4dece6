"""Pytest configuration and fixtures."""

from datetime import date, datetime, timezone
from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest

from watchlist_porter.config import ConfigManager
from watchlist_porter.core.interfaces import ICatalogService
from watchlist_porter.core.models import (
    CatalogResult,
    MediaKind,
    StreamingProvider,
    WatchlistEntry,
    WatchStatus,
)
from watchlist_porter.core.services import (
    BulkImportCommitter,
    InMemoryWatchlistStore,
    PreviewBuilder,
)
from watchlist_porter.infrastructure import Container
from watchlist_porter.utils import CatalogServiceError, normalize_title


class FakeCatalogService(ICatalogService):
    """Catalog that answers from a fixed table keyed by normalized title."""

    def __init__(self, results: Optional[Dict[str, List[CatalogResult]]] = None):
        self.results = results or {}
        self.failing_titles: set = set()
        self.calls: List[tuple] = []
        self.closed = False

    def add(self, query: str, *results: CatalogResult) -> None:
        self.results[normalize_title(query)] = list(results)

    async def search(self, title: str, year: Optional[int] = None) -> List[CatalogResult]:
        self.calls.append((title, year))
        key = normalize_title(title)
        if key in self.failing_titles:
            raise CatalogServiceError(f"TMDb search failed for '{title}': timeout")
        return [result.model_copy() for result in self.results.get(key, [])]

    async def close(self) -> None:
        self.closed = True


INCEPTION = CatalogResult(
    catalog_id=27205,
    media_kind=MediaKind.MOVIE,
    title="Inception",
    year=2010,
    poster_ref="/inception.jpg",
)
BREAKING_BAD = CatalogResult(
    catalog_id=1396,
    media_kind=MediaKind.TV,
    title="Breaking Bad",
    year=2008,
    poster_ref="/breaking_bad.jpg",
)
THE_MATRIX = CatalogResult(
    catalog_id=603,
    media_kind=MediaKind.MOVIE,
    title="The Matrix",
    year=1999,
    poster_ref="/matrix.jpg",
)
THE_MATRIX_RELOADED = CatalogResult(
    catalog_id=604,
    media_kind=MediaKind.MOVIE,
    title="The Matrix Reloaded",
    year=2003,
    poster_ref="/matrix_reloaded.jpg",
)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary configuration file."""
    config_content = f"""
catalog:
  api_key: "test-tmdb-key"

store:
  backend: "json"
  path: "{(tmp_path / 'watchlist.json').as_posix()}"
  owner_id: "test-user"

import:
  concurrency_limit: 3
  rating_scale: 10
  skip_unmatched: false
  default_duplicate_strategy: "skip"

logging:
  level: "DEBUG"
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file, load_env=False)


@pytest.fixture
def config(config_manager):
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def container(config_manager):
    """Create a test container."""
    container = Container(config_manager)
    return container


@pytest.fixture
def fake_catalog():
    """Catalog preloaded with a few well-known titles."""
    catalog = FakeCatalogService()
    catalog.add("Inception", INCEPTION)
    catalog.add("Breaking Bad", BREAKING_BAD)
    catalog.add("The Matrix", THE_MATRIX, THE_MATRIX_RELOADED)
    catalog.add("Matrix", THE_MATRIX_RELOADED, THE_MATRIX)
    return catalog


@pytest.fixture
def memory_store(config):
    """Empty in-memory watchlist store."""
    return InMemoryWatchlistStore(config)


@pytest.fixture
def preview_builder(config, fake_catalog, memory_store):
    """Preview builder wired to the fake catalog and in-memory store."""
    return PreviewBuilder(config, fake_catalog, memory_store)


@pytest.fixture
def committer(config, memory_store):
    """Bulk import committer writing to the in-memory store."""
    return BulkImportCommitter(config, memory_store)


@pytest.fixture
def mock_watchlist_store():
    """Mock watchlist store."""
    return Mock()


@pytest.fixture
def stored_entry():
    """A completed, rated movie as the store would hold it."""
    return WatchlistEntry(
        id="entry-1",
        owner_id="test-user",
        title="Inception",
        media_kind=MediaKind.MOVIE,
        release_date=date(2010, 7, 16),
        catalog_id=27205,
        poster_ref="/inception.jpg",
        status=WatchStatus.COMPLETED,
        rating=7,
        notes="Seen in cinema",
        streaming_providers=[StreamingProvider(name="netflix")],
        created_at=datetime(2023, 5, 1, 12, 0, tzinfo=timezone.utc),
        updated_at=datetime(2023, 5, 2, 12, 0, tzinfo=timezone.utc),
        completed_at=datetime(2023, 5, 2, 12, 0, tzinfo=timezone.utc),
    )
