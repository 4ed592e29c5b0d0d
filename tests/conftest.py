"""Shared fixtures: Spotify payload factories and domain builders."""

from collections.abc import Callable
from typing import Any

import pytest

from freshspot.domain.entities import (
    CatalogInfo,
    CatalogLink,
    Classification,
    DirectRef,
    FeedItem,
    RawPost,
    RedditInfo,
    RequestKind,
    Resolved,
    ResolvedItem,
    Unresolved,
)

AlbumFactory = Callable[..., dict[str, Any]]
TrackFactory = Callable[..., dict[str, Any]]


def _spotify_url(kind: str, item_id: str) -> str:
    return f"https://open.spotify.com/{kind}/{item_id}"


@pytest.fixture
def make_album() -> AlbumFactory:
    """Factory for Spotify album objects as /albums and /search return them."""

    def _make(
        album_id: str = "album0000000000000001",
        name: str = "Test Album",
        album_type: str = "album",
        total_tracks: int = 12,
        artist: str = "Test Artist",
        track_ids: list[str] | None = None,
        release_date: str | None = "2024-01-05",
    ) -> dict[str, Any]:
        album: dict[str, Any] = {
            "id": album_id,
            "type": "album",
            "name": name,
            "album_type": album_type,
            "total_tracks": total_tracks,
            "release_date": release_date,
            "images": [{"url": f"https://i.scdn.co/image/{album_id}", "height": 640}],
            "external_urls": {"spotify": _spotify_url("album", album_id)},
            "artists": [
                {
                    "name": artist,
                    "external_urls": {"spotify": _spotify_url("artist", "artist0001")},
                }
            ],
        }
        if track_ids is not None:
            album["tracks"] = {"items": [{"id": track_id} for track_id in track_ids]}
        return album

    return _make


@pytest.fixture
def make_track(make_album: AlbumFactory) -> TrackFactory:
    """Factory for Spotify track objects (with their embedding album)."""

    def _make(
        track_id: str = "track0000000000000001",
        name: str = "Test Track",
        album: dict[str, Any] | None = None,
        album_type: str = "album",
    ) -> dict[str, Any]:
        return {
            "id": track_id,
            "type": "track",
            "name": name,
            "external_urls": {"spotify": _spotify_url("track", track_id)},
            "album": album or make_album(album_type=album_type),
        }

    return _make


@pytest.fixture
def make_feed_item() -> Callable[..., FeedItem]:
    """Factory for normalized feed items."""

    def _make(
        item_id: str = "post1",
        request_kind: RequestKind = RequestKind.ALBUM,
        artist: str = "Test Artist",
        album: str | None = "Test Album",
        score: int = 100,
        direct_ref: DirectRef | None = None,
    ) -> FeedItem:
        return FeedItem(
            id=item_id,
            request_kind=request_kind,
            reddit_info=RedditInfo(
                artist=artist,
                album=album,
                score=score,
                permalink_url=f"https://www.reddit.com/r/hiphopheads/comments/{item_id}/",
            ),
            classification=(
                Classification.DIRECT_LINK if direct_ref else Classification.FREE_TEXT
            ),
            direct_ref=direct_ref,
        )

    return _make


@pytest.fixture
def make_catalog_info() -> Callable[..., CatalogInfo]:
    """Factory for CatalogInfo values."""

    def _make(
        name: str = "Test Album",
        catalog_url: str = "https://open.spotify.com/album/album0000000000000001",
        item_id: str = "album0000000000000001",
        item_type: str = "album",
    ) -> CatalogInfo:
        return CatalogInfo(
            name=name,
            image_url="https://i.scdn.co/image/cover",
            release_date="2024-01-05",
            catalog_url=catalog_url,
            artist=CatalogLink(
                name="Test Artist", url="https://open.spotify.com/artist/artist0001"
            ),
            album=CatalogLink(name=name, url=catalog_url),
            item_id=item_id,
            item_type=item_type,
        )

    return _make


@pytest.fixture
def make_resolved_item(
    make_feed_item: Callable[..., FeedItem],
    make_catalog_info: Callable[..., CatalogInfo],
) -> Callable[..., ResolvedItem]:
    """Factory for cached/resolved records. `catalog_url=None` builds an Unresolved one."""

    def _make(
        item_id: str = "post1",
        name: str = "Test Album",
        catalog_url: str | None = "https://open.spotify.com/album/album0000000000000001",
        request_kind: RequestKind = RequestKind.ALBUM,
        score: int = 100,
    ) -> ResolvedItem:
        item = make_feed_item(item_id=item_id, request_kind=request_kind, score=score)
        if catalog_url is None:
            return ResolvedItem(item=item, resolution=Unresolved())
        info = make_catalog_info(name=name, catalog_url=catalog_url)
        return ResolvedItem(item=item, resolution=Resolved(info))

    return _make


@pytest.fixture
def make_post() -> Callable[..., RawPost]:
    """Factory for raw Reddit posts."""

    def _make(
        post_id: str = "post1",
        title: str = "[FRESH ALBUM] Test Artist - Test Album",
        selftext: str = "",
        url: str = "https://www.reddit.com/r/hiphopheads/comments/post1/",
        score: int = 100,
    ) -> RawPost:
        return RawPost(
            id=post_id,
            title=title,
            selftext=selftext,
            url=url,
            score=score,
            permalink=f"/r/hiphopheads/comments/{post_id}/",
        )

    return _make
