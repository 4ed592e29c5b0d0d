"""Reddit search client: fetches one page of release announcements."""

import logging
from typing import Any

import httpx

from freshspot.config.settings import RedditSettings
from freshspot.domain.entities import FeedPage, FeedQuery, RawPost, RequestKind
from freshspot.domain.exceptions import FetchError
from freshspot.domain.ports import IFeedClient
from freshspot.infrastructure.observability.log_messages import LogMessages

logger = logging.getLogger(__name__)

# Reddit search returns at most 100, the frontend pages in 50s
PAGE_SIZE = 50

# Hey future me, these are Reddit search predicates, not regexes! ALBUM pulls every
# "FRESH ALBUM/EP/MIXTAPE" post; the general feed takes "FRESH" posts and explicitly excludes
# everything the album feed already covers plus music videos.
ALBUM_SEARCH_QUERY = (
    'flair_name:"FRESH ALBUM" OR "FRESH ALBUM" OR "FRESH EP" OR "FRESH MIXTAPE"'
)
FRESH_SEARCH_QUERY = (
    'flair_name:"FRESH" OR "FRESH" -flair_name:"FRESH ALBUM" -"FRESH ALBUM" '
    '-"FRESH EP" -"FRESH MIXTAPE" -"VIDEO"'
)


def build_search_query(request_kind: RequestKind) -> str:
    """Flair predicate for the requested kind of release."""
    if request_kind is RequestKind.ALBUM:
        return ALBUM_SEARCH_QUERY
    return FRESH_SEARCH_QUERY


def compute_count(page: int, backward: bool) -> int:
    """Number of results already seen, as Reddit's `count` parameter expects.

    Paging forward from page N we've seen N+1 pages, paging backward only N.
    """
    return page * PAGE_SIZE if backward else (page + 1) * PAGE_SIZE


class RedditClient(IFeedClient):
    """HTTP client for Reddit's JSON search endpoint."""

    def __init__(
        self,
        settings: RedditSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.timeout,
                headers={"User-Agent": self.settings.user_agent},
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client (only if we created it)."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def build_params(self, query: FeedQuery) -> dict[str, str | int]:
        """Query parameters for one search page."""
        params: dict[str, str | int] = {
            "q": build_search_query(query.request_kind),
            "sort": query.sort,
            "t": query.time_range,
            "restrict_sr": 1,
            "limit": PAGE_SIZE,
            "count": compute_count(query.page, backward=query.before is not None),
        }
        if query.after:
            params["after"] = query.after
        if query.before:
            params["before"] = query.before
        return params

    # Listen up, future me - FetchError is the ONLY failure that kills a whole request. No page,
    # nothing to resolve. We don't retry here either; if Reddit is down the caller sees a 502.
    async def fetch_page(self, query: FeedQuery) -> FeedPage:
        """
        Fetch one page of search results for a subreddit.

        Args:
            query: Subreddit, kind, sort, time range, page index and cursors

        Returns:
            Posts in feed order plus after/before cursors

        Raises:
            FetchError: If Reddit is unreachable, errors, or returns an unexpected payload
        """
        client = await self._get_client()
        subreddit = query.subreddit.strip("/")
        url = f"{self.settings.base_url}/{subreddit}/search.json"

        try:
            response = await client.get(url, params=self.build_params(query))
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(LogMessages.feed_fetch_failed(url=url, error=str(e)))
            raise FetchError(f"Reddit request failed: {e}", url=url) from e
        except ValueError as e:
            logger.error(LogMessages.feed_fetch_failed(url=url, error=str(e)))
            raise FetchError(f"Reddit returned a non-JSON body: {e}", url=url) from e

        try:
            page = self._parse_page(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(
                LogMessages.feed_fetch_failed(url=url, error=f"malformed payload: {e}")
            )
            raise FetchError(f"Malformed Reddit payload: {e}", url=url) from e

        logger.info(
            "Fetched %d posts from %s (page=%d, kind=%s)",
            len(page.posts),
            subreddit,
            query.page,
            query.request_kind.value,
        )
        return page

    @staticmethod
    def _parse_page(payload: dict[str, Any]) -> FeedPage:
        data = payload["data"]
        posts = [
            RawPost(
                id=str(child["data"]["id"]),
                title=child["data"]["title"],
                selftext=child["data"].get("selftext") or "",
                url=child["data"].get("url") or "",
                score=int(child["data"].get("score") or 0),
                permalink=child["data"]["permalink"],
            )
            for child in data["children"]
        ]
        return FeedPage(posts=posts, after=data.get("after"), before=data.get("before"))

    async def __aenter__(self) -> "RedditClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
