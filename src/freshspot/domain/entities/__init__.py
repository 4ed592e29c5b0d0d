"""Domain entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# Hey future me, RequestKind drives almost every branch in the pipeline: which Reddit flair
# query we send, which Spotify search type we ask for, and whether album records get the
# "is this secretly a single?" treatment. Inbound "q=album" is ALBUM, anything else is TRACK
# (the general "fresh" feed). Stored as its string value in the DB.
class RequestKind(str, Enum):
    """Kind of release a feed request is looking for."""

    ALBUM = "album"
    TRACK = "track"

    @classmethod
    def from_query(cls, value: str | None) -> "RequestKind":
        """Map the inbound `q` parameter to a request kind."""
        return cls.ALBUM if value == cls.ALBUM.value else cls.TRACK


class Classification(str, Enum):
    """How a post will be resolved against the catalog."""

    DIRECT_LINK = "spotify"  # Post already embeds an open.spotify.com link
    FREE_TEXT = "text"  # Needs a text search built from the title


@dataclass(frozen=True)
class DirectRef:
    """Catalog reference parsed out of a direct link."""

    catalog_id: str
    catalog_type: str  # "album", "track", sometimes "playlist"/"artist" (unsupported)


@dataclass(frozen=True)
class RedditInfo:
    """Display data taken from the forum post."""

    artist: str
    album: str | None
    score: int
    permalink_url: str


@dataclass(frozen=True)
class FeedItem:
    """One normalized forum post, ready for resolution."""

    id: str
    request_kind: RequestKind
    reddit_info: RedditInfo
    classification: Classification
    direct_ref: DirectRef | None = None


@dataclass(frozen=True)
class CatalogLink:
    """Name + URL pair for the artist/album shown next to an item."""

    name: str
    url: str


@dataclass(frozen=True)
class CatalogInfo:
    """Catalog metadata attached to a resolved item. Immutable once attached."""

    name: str
    image_url: str
    release_date: str | None
    catalog_url: str
    artist: CatalogLink
    album: CatalogLink
    item_id: str
    item_type: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON storage."""
        return {
            "name": self.name,
            "image_url": self.image_url,
            "release_date": self.release_date,
            "catalog_url": self.catalog_url,
            "artist": {"name": self.artist.name, "url": self.artist.url},
            "album": {"name": self.album.name, "url": self.album.url},
            "item_id": self.item_id,
            "item_type": self.item_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogInfo":
        """Rebuild from JSON storage."""
        return cls(
            name=data["name"],
            image_url=data["image_url"],
            release_date=data.get("release_date"),
            catalog_url=data["catalog_url"],
            artist=CatalogLink(**data["artist"]),
            album=CatalogLink(**data["album"]),
            item_id=data["item_id"],
            item_type=data["item_type"],
        )


# Yo, this is the tagged variant that replaces "sometimes there's a spotInfo, sometimes it's {}".
# An item is either Resolved (with CatalogInfo) or Unresolved (permanently - we looked and there
# is nothing worth showing). Pattern-match on the type, never poke at optional attributes.
@dataclass(frozen=True)
class Resolved:
    """Catalog lookup succeeded."""

    catalog_info: CatalogInfo


@dataclass(frozen=True)
class Unresolved:
    """Catalog lookup found nothing usable. Cached so we never ask again."""


Resolution = Resolved | Unresolved


@dataclass(frozen=True)
class ResolvedItem:
    """A FeedItem plus the outcome of resolving it."""

    item: FeedItem
    resolution: Resolution

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def resolved(self) -> bool:
        return isinstance(self.resolution, Resolved)

    @property
    def catalog_info(self) -> CatalogInfo | None:
        if isinstance(self.resolution, Resolved):
            return self.resolution.catalog_info
        return None

    def with_reddit_info(self, reddit_info: RedditInfo) -> "ResolvedItem":
        """Copy of this item carrying fresher forum data (score, permalink)."""
        item = FeedItem(
            id=self.item.id,
            request_kind=self.item.request_kind,
            reddit_info=reddit_info,
            classification=self.item.classification,
            direct_ref=self.item.direct_ref,
        )
        return ResolvedItem(item=item, resolution=self.resolution)


@dataclass(frozen=True)
class RawPost:
    """A post as returned by the forum source, before normalization."""

    id: str
    title: str
    selftext: str
    url: str
    score: int
    permalink: str


@dataclass
class FeedPage:
    """One page of forum posts plus pagination cursors."""

    posts: list[RawPost] = field(default_factory=list)
    after: str | None = None
    before: str | None = None


@dataclass(frozen=True)
class FeedQuery:
    """Inbound parameters for one feed page."""

    subreddit: str
    request_kind: RequestKind
    sort: str = "new"
    time_range: str = "week"
    page: int = 0
    after: str | None = None
    before: str | None = None


@dataclass
class PipelineResult:
    """Ordered, duplicate-free resolved items for one feed page."""

    results: list[ResolvedItem] = field(default_factory=list)
    after: str | None = None
    before: str | None = None


__all__ = [
    "CatalogInfo",
    "CatalogLink",
    "Classification",
    "DirectRef",
    "FeedItem",
    "FeedPage",
    "FeedQuery",
    "PipelineResult",
    "RawPost",
    "RedditInfo",
    "RequestKind",
    "Resolution",
    "Resolved",
    "ResolvedItem",
    "Unresolved",
]
