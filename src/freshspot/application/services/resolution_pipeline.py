"""Resolution pipeline - one feed page in, ordered catalog entries out.

Hey future me - this is THE use case of the whole app. One inbound request runs it once:

    1. fetch a Reddit page, normalize every post into a FeedItem
    2. one batched cache read for all ids
    3. resolve the misses:
       - direct album links   -> GET /albums in batches of 20 (sequential)
       - direct track links   -> GET /tracks in batches of 50 (sequential)
       - everything else      -> one search per post, all concurrently
    4. write back every NEW outcome (resolved AND unresolved)
    5. merge with the cache hits, drop illegal names, restore feed order, dedupe by URL

Failure granularity is the important bit:
- FetchError (no page)           -> whole request fails, bubbles to the API layer
- CatalogLookupFailure (1 call)  -> only the items riding on that call are dropped
- EnrichmentFailure (1 record)   -> only that item is dropped, and NOT cached
- MalformedReference (1 post)    -> only that post is dropped
Nothing is retried. Dropped-but-uncached items are simply looked up again next request.
"""

import asyncio
import logging
from collections.abc import Iterator, Sequence
from typing import TypeVar

from freshspot.application.services.catalog_enrichment import (
    enrich_album,
    enrich_record,
    is_oversized_for_track,
)
from freshspot.application.services.catalog_matcher import select_album, select_track
from freshspot.config.settings import SpotifySettings
from freshspot.domain.entities import (
    Classification,
    FeedItem,
    FeedQuery,
    PipelineResult,
    RawPost,
    RequestKind,
    Resolved,
    ResolvedItem,
    Unresolved,
)
from freshspot.domain.exceptions import (
    CatalogLookupFailure,
    EnrichmentFailure,
    MalformedReference,
)
from freshspot.domain.ports import ICatalogClient, IFeedClient, IResolvedItemRepository
from freshspot.domain.value_objects import normalize_post
from freshspot.infrastructure.observability.log_messages import LogMessages

logger = logging.getLogger(__name__)

# Names that slip through the title parser as garbage matches
ILLEGAL_TERMS: tuple[str, ...] = ("karaoke", "meditation")
# Filtered for track requests only
TRACK_ONLY_ILLEGAL_TERMS: tuple[str, ...] = ("donda",)

ALBUM_REF_TYPE = "album"
TRACK_REF_TYPE = "track"

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most `size` items."""
    for start in range(0, len(items), size):
        yield items[start : start + size]


def build_search_text(item: FeedItem) -> str:
    """Free-text search query for a post: "artist album", or just the artist."""
    info = item.reddit_info
    if info.album is None:
        return info.artist
    return f"{info.artist} {info.album}"


class ResolutionPipeline:
    """Resolve one page of forum posts to catalog entries, using the cache first."""

    def __init__(
        self,
        feed_client: IFeedClient,
        catalog_client: ICatalogClient,
        repository: IResolvedItemRepository,
        spotify_settings: SpotifySettings,
        illegal_terms: Sequence[str] = ILLEGAL_TERMS,
        track_only_illegal_terms: Sequence[str] = TRACK_ONLY_ILLEGAL_TERMS,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            feed_client: Source of forum pages
            catalog_client: Spotify lookups and searches
            repository: Resolution cache
            spotify_settings: Batch size ceilings
            illegal_terms: Name substrings never shown
            track_only_illegal_terms: Name substrings never shown for track requests
        """
        self.feed_client = feed_client
        self.catalog_client = catalog_client
        self.repository = repository
        self.album_batch_size = spotify_settings.album_batch_size
        self.track_batch_size = spotify_settings.track_batch_size
        self.illegal_terms = tuple(term.lower() for term in illegal_terms)
        self.track_only_illegal_terms = tuple(
            term.lower() for term in track_only_illegal_terms
        )

    async def run(self, query: FeedQuery, credential: str) -> PipelineResult:
        """
        Run the pipeline for one feed page.

        Args:
            query: Feed parameters (subreddit, kind, paging)
            credential: Spotify Authorization header value, forwarded untouched

        Returns:
            Resolved items in feed order, pairwise distinct catalog URLs, plus cursors

        Raises:
            FetchError: If the forum page cannot be fetched
        """
        page = await self.feed_client.fetch_page(query)
        items = self._normalize(page.posts, query.request_kind)
        order = [item.id for item in items]

        cached = await self.repository.lookup_many(order)
        to_resolve = [item for item in items if item.id not in cached]

        new_records = await self._resolve(to_resolve, query.request_kind, credential)
        if new_records:
            await self.repository.persist_many(new_records)

        # Hey future me - cache hits get the CURRENT post's reddit info (score moves, permalink
        # is stable) but keep their stored catalog info. Unresolved hits never get shown.
        current_info = {item.id: item.reddit_info for item in items}
        pool: dict[str, ResolvedItem] = {}
        for item_id, record in cached.items():
            if record.resolved:
                pool[item_id] = record.with_reddit_info(current_info[item_id])
        for record in new_records:
            if record.resolved:
                pool.setdefault(record.id, record)

        visible = {
            item_id: record
            for item_id, record in pool.items()
            if not self._is_illegal(record, query.request_kind)
        }
        results = self._assemble(order, visible)

        logger.info(
            "Resolved page: %d posts, %d cached, %d new, %d shown",
            len(items),
            len(cached),
            len(new_records),
            len(results),
        )
        return PipelineResult(results=results, after=page.after, before=page.before)

    def _normalize(
        self, posts: Sequence[RawPost], request_kind: RequestKind
    ) -> list[FeedItem]:
        items: list[FeedItem] = []
        for post in posts:
            try:
                items.append(normalize_post(post, request_kind))
            except MalformedReference as e:
                logger.warning(LogMessages.reference_malformed(item_id=post.id, text=e.text))
        return items

    async def _resolve(
        self,
        items: Sequence[FeedItem],
        request_kind: RequestKind,
        credential: str,
    ) -> list[ResolvedItem]:
        """Resolve cache misses; dropped items are simply absent from the result."""
        album_items: list[FeedItem] = []
        track_items: list[FeedItem] = []
        text_items: list[FeedItem] = []

        for item in items:
            if item.classification is Classification.FREE_TEXT or item.direct_ref is None:
                text_items.append(item)
            elif item.direct_ref.catalog_type == ALBUM_REF_TYPE:
                album_items.append(item)
            elif item.direct_ref.catalog_type == TRACK_REF_TYPE:
                track_items.append(item)
            else:
                logger.info(
                    LogMessages.reference_unsupported(
                        item_id=item.id, catalog_type=item.direct_ref.catalog_type
                    )
                )

        records: list[ResolvedItem] = []
        for batch in chunked(album_items, self.album_batch_size):
            records.extend(
                await self._resolve_album_batch(batch, request_kind, credential)
            )
        for batch in chunked(track_items, self.track_batch_size):
            records.extend(
                await self._resolve_track_batch(batch, request_kind, credential)
            )

        searched = await asyncio.gather(
            *(self._resolve_by_search(item, credential) for item in text_items)
        )
        records.extend(record for record in searched if record is not None)
        return records

    # Yo future me, the /albums response is POSITIONAL - albums[i] belongs to batch[i]. zip()
    # keeps that pairing; a null album (deleted id) becomes EnrichmentFailure in enrich_album.
    async def _resolve_album_batch(
        self,
        batch: Sequence[FeedItem],
        request_kind: RequestKind,
        credential: str,
    ) -> list[ResolvedItem]:
        ids = [item.direct_ref.catalog_id for item in batch if item.direct_ref]
        try:
            albums = await self.catalog_client.get_albums(ids, credential)
        except CatalogLookupFailure as e:
            logger.warning(
                LogMessages.catalog_batch_failed(
                    kind="album", item_count=len(batch), error=str(e)
                )
            )
            return []

        records: list[ResolvedItem] = []
        for item, album in zip(batch, albums):
            if album is not None and is_oversized_for_track(album, request_kind):
                records.append(ResolvedItem(item=item, resolution=Unresolved()))
                continue
            try:
                catalog_info = await enrich_album(
                    album, request_kind, self.catalog_client, credential, item.id
                )
            except EnrichmentFailure as e:
                logger.warning(
                    LogMessages.enrichment_failed(item_id=item.id, reason=e.reason)
                )
                continue
            records.append(ResolvedItem(item=item, resolution=Resolved(catalog_info)))
        return records

    async def _resolve_track_batch(
        self,
        batch: Sequence[FeedItem],
        request_kind: RequestKind,
        credential: str,
    ) -> list[ResolvedItem]:
        ids = [item.direct_ref.catalog_id for item in batch if item.direct_ref]
        try:
            tracks = await self.catalog_client.get_tracks(ids, credential)
        except CatalogLookupFailure as e:
            logger.warning(
                LogMessages.catalog_batch_failed(
                    kind="track", item_count=len(batch), error=str(e)
                )
            )
            return []

        records: list[ResolvedItem] = []
        for item, track in zip(batch, tracks):
            try:
                catalog_info = await enrich_record(
                    track, request_kind, self.catalog_client, credential, item.id
                )
            except EnrichmentFailure as e:
                logger.warning(
                    LogMessages.enrichment_failed(item_id=item.id, reason=e.reason)
                )
                continue
            records.append(ResolvedItem(item=item, resolution=Resolved(catalog_info)))
        return records

    # Hey future me - each search catches its OWN failures. One failed search must never take
    # down the gather() and with it every other search on the page.
    async def _resolve_by_search(
        self, item: FeedItem, credential: str
    ) -> ResolvedItem | None:
        """Search for one free-text post. None means dropped (not cached)."""
        request_kind = item.request_kind
        try:
            candidates = await self.catalog_client.search(
                build_search_text(item), request_kind.value, credential
            )
            if request_kind is RequestKind.ALBUM:
                selected = select_album(
                    candidates, item.reddit_info.album, item.reddit_info.artist
                )
            else:
                selected = select_track(candidates)

            if selected is None:
                return ResolvedItem(item=item, resolution=Unresolved())

            catalog_info = await enrich_record(
                selected, request_kind, self.catalog_client, credential, item.id
            )
        except CatalogLookupFailure as e:
            logger.warning(
                LogMessages.catalog_batch_failed(kind="search", item_count=1, error=str(e))
            )
            return None
        except EnrichmentFailure as e:
            logger.warning(LogMessages.enrichment_failed(item_id=item.id, reason=e.reason))
            return None

        return ResolvedItem(item=item, resolution=Resolved(catalog_info))

    def _is_illegal(self, record: ResolvedItem, request_kind: RequestKind) -> bool:
        catalog_info = record.catalog_info
        if catalog_info is None:
            return False
        name = catalog_info.name.lower()
        if any(term in name for term in self.illegal_terms):
            return True
        return request_kind is RequestKind.TRACK and any(
            term in name for term in self.track_only_illegal_terms
        )

    @staticmethod
    def _assemble(
        order: Sequence[str], pool: dict[str, ResolvedItem]
    ) -> list[ResolvedItem]:
        """Restore feed order and keep the first item per catalog URL."""
        results: list[ResolvedItem] = []
        seen_urls: set[str] = set()
        for item_id in order:
            record = pool.get(item_id)
            if record is None or record.catalog_info is None:
                continue
            url = record.catalog_info.catalog_url
            if url in seen_urls:
                continue
            seen_urls.add(url)
            results.append(record)
        return results
