"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Any

from freshspot.domain.entities import FeedPage, FeedQuery, ResolvedItem


class IFeedClient(ABC):
    """Port for the forum feed source."""

    @abstractmethod
    async def fetch_page(self, query: FeedQuery) -> FeedPage:
        """Fetch one page of posts.

        Raises:
            FetchError: If the source is unreachable or the payload is malformed
        """
        pass


# Hey future me, ICatalogClient returns RAW Spotify JSON. The matcher and the
# enrichment rule both need the raw payload shape (album_type, total_tracks, nested album) and
# every one of those fields can be missing - that's EnrichmentFailure territory, not the
# client's business. The client only fails whole calls (CatalogLookupFailure).
class ICatalogClient(ABC):
    """Port for the music catalog service."""

    @abstractmethod
    async def get_albums(
        self, album_ids: Sequence[str], credential: str
    ) -> list[dict[str, Any] | None]:
        """Bulk album lookup. Result positions match the requested ids (null if unknown)."""
        pass

    @abstractmethod
    async def get_tracks(
        self, track_ids: Sequence[str], credential: str
    ) -> list[dict[str, Any] | None]:
        """Bulk track lookup. Result positions match the requested ids (null if unknown)."""
        pass

    @abstractmethod
    async def get_album_tracks(
        self, album_id: str, credential: str
    ) -> list[dict[str, Any]]:
        """Track listing of one album."""
        pass

    @abstractmethod
    async def search(
        self, query: str, search_type: str, credential: str
    ) -> list[dict[str, Any]]:
        """Free-text search. Returns the candidate items for `search_type`."""
        pass


class IResolvedItemRepository(ABC):
    """Port for the resolution cache (write-once log keyed by post id)."""

    @abstractmethod
    async def lookup_many(self, ids: Iterable[str]) -> dict[str, ResolvedItem]:
        """Return the cached records for the ids that exist."""
        pass

    @abstractmethod
    async def persist_many(self, items: Sequence[ResolvedItem]) -> None:
        """Insert new records; ids that already exist are left untouched."""
        pass


__all__ = ["ICatalogClient", "IFeedClient", "IResolvedItemRepository"]
