"""HTTP watchlist store implementation."""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import WatchlistStoreError
from ..interfaces import IWatchlistStore
from ..models import MediaKind, WatchlistEntry


class HttpWatchlistStore(IWatchlistStore, LoggerMixin):
    """Watchlist store backed by a REST API.

    Endpoints (relative to ``store.url``)::

        GET  /entries?ownerId=...          list entries
        GET  /entries/duplicate?...         find a duplicate (404 if none)
        GET  /entries/{id}                  get an entry (404 if missing)
        POST /entries                       create an entry
        PUT  /entries/{id}                  replace an entry
    """

    def __init__(
        self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        """Initialize HTTP store.

        Args:
            config: Application configuration.
            transport: Custom httpx transport, mainly for tests.
        """
        self._config = config
        self._store_config = config.store
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def find_duplicate(
        self,
        catalog_id: Optional[int],
        title: str,
        year: Optional[int] = None,
        media_kind: Optional[MediaKind] = None,
    ) -> Optional[WatchlistEntry]:
        """Ask the API for a stored duplicate."""
        params: Dict[str, Any] = {"ownerId": self._store_config.owner_id, "title": title}
        if catalog_id is not None:
            params["catalogId"] = catalog_id
        if year:
            params["year"] = year
        if media_kind is not None:
            params["mediaKind"] = media_kind.value

        data = await self._request("GET", "/entries/duplicate", params=params, allow_missing=True)
        return self._parse_entry(data) if data else None

    async def get_entry(self, entry_id: str) -> Optional[WatchlistEntry]:
        """Get an entry by id."""
        data = await self._request("GET", f"/entries/{entry_id}", allow_missing=True)
        return self._parse_entry(data) if data else None

    async def create_entry(self, entry: WatchlistEntry) -> WatchlistEntry:
        """Create an entry through the API."""
        payload = entry.model_dump(mode="json", exclude={"id"})
        payload["owner_id"] = self._store_config.owner_id

        data = await self._request("POST", "/entries", json=payload)
        created = self._parse_entry(data)
        self.logger.debug(f"Created remote entry {created.id} for '{created.title}'")
        return created

    async def update_entry(self, entry: WatchlistEntry) -> WatchlistEntry:
        """Replace an entry through the API."""
        if not entry.id:
            raise WatchlistStoreError("Cannot update an entry without an id")

        data = await self._request(
            "PUT", f"/entries/{entry.id}", json=entry.model_dump(mode="json")
        )
        if data is None:
            raise WatchlistStoreError(f"Watchlist entry not found: {entry.id}")
        return self._parse_entry(data)

    async def list_entries(self) -> List[WatchlistEntry]:
        """List entries of the configured owner."""
        data = await self._request(
            "GET", "/entries", params={"ownerId": self._store_config.owner_id}
        )
        if isinstance(data, dict):
            data = data.get("data", data.get("entries", []))
        if not isinstance(data, list):
            raise WatchlistStoreError("Unexpected entry list response from watchlist API")
        return [self._parse_entry(item) for item in data]

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        allow_missing: bool = False,
    ) -> Any:
        """Send a request and decode the JSON body.

        Args:
            method: HTTP method.
            path: Path relative to the store URL.
            params: Query parameters.
            json: JSON body.
            allow_missing: Return None on 404 instead of failing.

        Returns:
            Decoded JSON body, or None for an allowed 404.

        Raises:
            WatchlistStoreError: If the request fails.
        """
        try:
            response = await self._get_client().request(method, path, params=params, json=json)
            if allow_missing and response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json() if response.content else None

        except Exception as e:
            error_msg = f"Watchlist API {method} {path} failed: {e}"
            self.logger.error(error_msg)
            raise WatchlistStoreError(error_msg) from e

    def _parse_entry(self, data: Any) -> WatchlistEntry:
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        try:
            return WatchlistEntry.model_validate(data)
        except ValidationError as e:
            raise WatchlistStoreError(f"Invalid entry returned by watchlist API: {e}") from e

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client.

        Returns:
            HTTP client.
        """
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._store_config.api_key:
                headers["X-Api-Key"] = self._store_config.api_key

            self._client = httpx.AsyncClient(
                base_url=self._store_config.url or "",
                headers=headers,
                timeout=self._store_config.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpWatchlistStore":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
