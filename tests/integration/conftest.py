"""Integration test fixtures and configuration."""

import logging

import pytest

from watchlist_porter.config import ConfigManager
from watchlist_porter.core.interfaces import ICatalogService
from watchlist_porter.infrastructure import Container

from ..conftest import BREAKING_BAD, INCEPTION, THE_MATRIX, THE_MATRIX_RELOADED, FakeCatalogService

SAMPLE_CSV = (
    "Title,Year,Status,My Rating,Date Added,Streaming Providers,Comments\n"
    'Inception,2010,Watched,9,2024-01-15,"Netflix, Hulu",Seen in cinema\n'
    "Breaking Bad,,in progress,8,01/20/2024,Netflix,\n"
    "The Matrix,1999,to watch,,,,\n"
    "Some Home Video,,,,,,\n"
)


@pytest.fixture
def integration_config(tmp_path):
    """Configuration file using a JSON store under the test directory."""
    config_content = f"""
catalog:
  api_key: "integration-tmdb-key"

store:
  backend: "json"
  path: "{(tmp_path / 'store' / 'watchlist.json').as_posix()}"
  owner_id: "integration-user"

import:
  concurrency_limit: 2
  rating_scale: 10
  skip_unmatched: false
  default_duplicate_strategy: "skip"

export:
  format: "json"

logging:
  level: "WARNING"
"""
    config_file = tmp_path / "integration_config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def integration_catalog():
    """Catalog answering for the titles in the sample import."""
    catalog = FakeCatalogService()
    catalog.add("Inception", INCEPTION)
    catalog.add("Breaking Bad", BREAKING_BAD)
    catalog.add("The Matrix", THE_MATRIX, THE_MATRIX_RELOADED)
    return catalog


@pytest.fixture
def make_container(integration_config, integration_catalog):
    """Factory for fully wired containers sharing one config and catalog."""

    def factory() -> Container:
        container = Container(ConfigManager(integration_config, load_env=False))
        container.configure_default_services()
        container.register_instance(ICatalogService, integration_catalog)
        return container

    return factory


@pytest.fixture
def integration_container(make_container):
    """Container with the JSON store and the fake catalog."""
    return make_container()


@pytest.fixture
def sample_import_file(tmp_path):
    """CSV import file in the shape other services export."""
    import_file = tmp_path / "my_list.csv"
    import_file.write_text(SAMPLE_CSV, encoding="utf-8")
    return import_file


@pytest.fixture
def restore_logging():
    """Restore root logger handlers replaced by the CLI."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    yield

    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
