"""Spotify Web API client for bulk catalog lookups and free-text search."""

import logging
from collections.abc import Sequence
from typing import Any, cast

import httpx

from freshspot.config.settings import SpotifySettings
from freshspot.domain.exceptions import CatalogLookupFailure
from freshspot.domain.ports import ICatalogClient

logger = logging.getLogger(__name__)


class SpotifyClient(ICatalogClient):
    """HTTP client for the Spotify catalog endpoints the resolver needs."""

    # Hey future me, we DON'T create the httpx client in __init__ - it gets lazy-loaded in
    # _get_client() so the object can be built outside a running event loop (app factory, tests).
    # Tests pass their own client with an httpx.MockTransport instead.
    def __init__(
        self,
        settings: SpotifySettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize Spotify client.

        Args:
            settings: Spotify configuration settings
            client: Optional pre-built HTTP client (owned by the caller)
        """
        self.settings = settings
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client (only if we created it)."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # Hey future me - ALL Spotify calls go through here. There is deliberately NO retry loop and
    # NO 429 backoff: the resolver's contract is "a failed call drops its items, the next page load
    # tries again". Every transport error, non-2xx status or non-JSON body becomes
    # CatalogLookupFailure so callers only ever catch one thing.
    # The credential is the caller's Authorization header value, forwarded untouched.
    async def _api_request(
        self,
        path: str,
        credential: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make one GET request against the Spotify API.

        Args:
            path: Path below the API base URL (e.g. "/albums")
            credential: Authorization header value ("Bearer ...")
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            CatalogLookupFailure: On any transport, HTTP or decoding error
        """
        client = await self._get_client()
        url = f"{self.settings.api_base_url}{path}"
        headers = {
            "Authorization": credential,
            "Content-Type": "application/json",
        }

        try:
            response = await client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return cast(dict[str, Any], response.json())
        except httpx.HTTPStatusError as e:
            raise CatalogLookupFailure(
                f"Spotify request failed with status {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise CatalogLookupFailure(
                f"Spotify request failed: {e}", url=url
            ) from e
        except ValueError as e:
            raise CatalogLookupFailure(
                f"Spotify returned a non-JSON body: {e}", url=url
            ) from e

    @staticmethod
    def _extract(payload: dict[str, Any], *keys: str) -> Any:
        """Walk into the response payload, failing the whole call if the shape is wrong."""
        value: Any = payload
        try:
            for key in keys:
                value = value[key]
        except (KeyError, TypeError) as e:
            raise CatalogLookupFailure(
                f"Unexpected Spotify response shape, missing {'.'.join(keys)}"
            ) from e
        return value

    # Yo future me, GET /albums takes at most 20 comma-joined ids. The result array is POSITIONAL:
    # albums[i] belongs to album_ids[i], and unknown/deleted ids come back as null in place.
    # Never filter the nulls here - the pipeline pairs responses with items by index!
    async def get_albums(
        self, album_ids: Sequence[str], credential: str
    ) -> list[dict[str, Any] | None]:
        """
        Get several albums in one request.

        Args:
            album_ids: Spotify album IDs (max album_batch_size)
            credential: Authorization header value

        Returns:
            Album objects in request order, None for unknown ids

        Raises:
            ValueError: If more ids than the batch ceiling are passed
            CatalogLookupFailure: If the request fails
        """
        if len(album_ids) > self.settings.album_batch_size:
            raise ValueError(
                f"At most {self.settings.album_batch_size} album ids per request"
            )
        payload = await self._api_request(
            "/albums", credential, params={"ids": ",".join(album_ids)}
        )
        return cast(list[dict[str, Any] | None], self._extract(payload, "albums"))

    async def get_tracks(
        self, track_ids: Sequence[str], credential: str
    ) -> list[dict[str, Any] | None]:
        """
        Get several tracks in one request (positional, None for unknown ids).

        Raises:
            ValueError: If more ids than the batch ceiling are passed
            CatalogLookupFailure: If the request fails
        """
        if len(track_ids) > self.settings.track_batch_size:
            raise ValueError(
                f"At most {self.settings.track_batch_size} track ids per request"
            )
        payload = await self._api_request(
            "/tracks", credential, params={"ids": ",".join(track_ids)}
        )
        return cast(list[dict[str, Any] | None], self._extract(payload, "tracks"))

    async def get_album_tracks(
        self, album_id: str, credential: str
    ) -> list[dict[str, Any]]:
        """Get the (first page of the) track listing of an album."""
        payload = await self._api_request(f"/albums/{album_id}/tracks", credential)
        return cast(list[dict[str, Any]], self._extract(payload, "items"))

    # Hey future me, Spotify nests search results per type: type=album -> {"albums": {"items": [...]}},
    # type=track -> {"tracks": {"items": [...]}}. We unwrap to the bare candidate list so the matcher
    # never sees the envelope.
    async def search(
        self, query: str, search_type: str, credential: str
    ) -> list[dict[str, Any]]:
        """
        Free-text catalog search.

        Args:
            query: Search text ("artist album")
            search_type: "album" or "track"
            credential: Authorization header value

        Returns:
            Candidate items, best match first

        Raises:
            CatalogLookupFailure: If the request fails
        """
        payload = await self._api_request(
            "/search", credential, params={"q": query, "type": search_type}
        )
        return cast(
            list[dict[str, Any]], self._extract(payload, f"{search_type}s", "items")
        )

    async def __aenter__(self) -> "SpotifyClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
