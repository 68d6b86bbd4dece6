"""TMDb catalog service implementation."""

from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import CatalogServiceError
from ..interfaces import ICatalogService
from ..models import CatalogResult, MediaKind

_SEARCHABLE_MEDIA_TYPES = {"movie": MediaKind.MOVIE, "tv": MediaKind.TV}


class TMDbCatalogService(ICatalogService, LoggerMixin):
    """Movie and TV search backed by the TMDb multi-search endpoint."""

    def __init__(self, config: Config) -> None:
        """Initialize TMDb catalog service.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._catalog_config = config.catalog
        self._session: Optional[aiohttp.ClientSession] = None

    async def search(self, title: str, year: Optional[int] = None) -> List[CatalogResult]:
        """Search TMDb for movies and TV series.

        The multi-search endpoint has no year filter, so ``year`` only
        affects scoring downstream.

        Args:
            title: Title to search for.
            year: Release year hint.

        Returns:
            Movie and TV results in TMDb order. People are dropped.

        Raises:
            CatalogServiceError: If the search fails.
        """
        query = title.strip()
        if not query:
            return []

        params = {
            "api_key": self._catalog_config.api_key,
            "query": query,
            "language": self._catalog_config.language,
            "include_adult": "true" if self._catalog_config.include_adult else "false",
            "page": "1",
        }

        try:
            data = await self._request_json("/search/multi", params)
        except CatalogServiceError:
            raise
        except Exception as e:
            error_msg = f"TMDb search failed for '{query}': {e}"
            self.logger.error(error_msg)
            raise CatalogServiceError(error_msg) from e

        raw_results = data.get("results", []) if isinstance(data, dict) else []
        if not isinstance(raw_results, list):
            return []

        results = []
        for raw in raw_results:
            result = self._parse_result(raw)
            if result is not None:
                results.append(result)
            if len(results) >= self._catalog_config.max_results:
                break

        self.logger.debug(f"TMDb returned {len(results)} result(s) for '{query}' ({year})")
        return results

    async def _request_json(self, path: str, params: Dict[str, str]) -> Any:
        """Perform a GET request and decode the JSON body.

        Args:
            path: Endpoint path relative to the base URL.
            params: Query parameters.

        Returns:
            Decoded response body.

        Raises:
            CatalogServiceError: If TMDb rejects the request.
        """
        url = f"{self._catalog_config.base_url}{path}"

        async with self._get_session().get(url, params=params) as response:
            if response.status == 401:
                raise CatalogServiceError("TMDb rejected the API key (HTTP 401)")
            if response.status == 429:
                raise CatalogServiceError("TMDb rate limit exceeded (HTTP 429)")
            response.raise_for_status()
            return await response.json()

    def _parse_result(self, data: Any) -> Optional[CatalogResult]:
        """Parse a TMDb multi-search result.

        Args:
            data: TMDb result data.

        Returns:
            CatalogResult, or None for people and malformed results.
        """
        if not isinstance(data, dict):
            return None

        media_kind = _SEARCHABLE_MEDIA_TYPES.get(data.get("media_type", ""))
        catalog_id = data.get("id")
        if media_kind is None or not isinstance(catalog_id, int) or catalog_id <= 0:
            return None

        # Movies carry title/release_date, series carry name/first_air_date
        title = data.get("title") or data.get("name") or "Unknown"
        release = data.get("release_date") or data.get("first_air_date")

        year = None
        if release:
            try:
                year = datetime.strptime(release, "%Y-%m-%d").year
            except (TypeError, ValueError):
                self.logger.debug(f"Ignoring malformed release date {release!r} for {title}")

        return CatalogResult(
            catalog_id=catalog_id,
            media_kind=media_kind,
            title=title,
            year=year,
            poster_ref=data.get("poster_path"),
            backdrop_ref=data.get("backdrop_path"),
            overview=data.get("overview") or None,
        )

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session.

        Returns:
            HTTP session.
        """
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self._catalog_config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "TMDbCatalogService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
