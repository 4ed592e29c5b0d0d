"""API schemas for the resolved feed."""

from pydantic import BaseModel, Field

from freshspot.domain.entities import PipelineResult, ResolvedItem


class DirectRefResponse(BaseModel):
    """Catalog reference parsed from a direct link."""

    catalog_id: str = Field(..., description="Spotify id (22 characters)")
    catalog_type: str = Field(..., description="album or track")


class RedditInfoResponse(BaseModel):
    """Display data from the forum post."""

    artist: str = Field(..., description="Artist parsed from the post title")
    album: str | None = Field(
        default=None, description="Album/track parsed from the post title"
    )
    score: int = Field(..., description="Current post score")
    permalink_url: str = Field(..., description="Absolute link to the post")


class CatalogLinkResponse(BaseModel):
    """Name + URL pair."""

    name: str
    url: str


class CatalogInfoResponse(BaseModel):
    """Catalog metadata for a resolved item."""

    name: str
    image_url: str
    release_date: str | None = None
    catalog_url: str
    artist: CatalogLinkResponse
    album: CatalogLinkResponse
    item_id: str = Field(..., description="Id to embed (a track id for singles)")
    item_type: str = Field(..., description="Type segment of catalog_url")


class ResolvedItemResponse(BaseModel):
    """One resolved feed entry."""

    id: str = Field(..., description="Forum post id")
    request_kind: str
    classification: str
    direct_ref: DirectRefResponse | None = None
    reddit_info: RedditInfoResponse
    resolved: bool
    catalog_info: CatalogInfoResponse | None = None

    @classmethod
    def from_entity(cls, record: ResolvedItem) -> "ResolvedItemResponse":
        """Convert a domain ResolvedItem to its response shape."""
        item = record.item
        catalog_info = record.catalog_info
        return cls(
            id=item.id,
            request_kind=item.request_kind.value,
            classification=item.classification.value,
            direct_ref=(
                DirectRefResponse(
                    catalog_id=item.direct_ref.catalog_id,
                    catalog_type=item.direct_ref.catalog_type,
                )
                if item.direct_ref
                else None
            ),
            reddit_info=RedditInfoResponse(
                artist=item.reddit_info.artist,
                album=item.reddit_info.album,
                score=item.reddit_info.score,
                permalink_url=item.reddit_info.permalink_url,
            ),
            resolved=record.resolved,
            catalog_info=(
                CatalogInfoResponse.model_validate(catalog_info.to_dict())
                if catalog_info
                else None
            ),
        )


class ItemsResponse(BaseModel):
    """One resolved feed page plus Reddit pagination cursors."""

    results: list[ResolvedItemResponse] = Field(default_factory=list)
    after: str | None = Field(default=None, description="Cursor for the next page")
    before: str | None = Field(default=None, description="Cursor for the previous page")

    @classmethod
    def from_result(cls, result: PipelineResult) -> "ItemsResponse":
        """Convert a pipeline result to the response shape."""
        return cls(
            results=[ResolvedItemResponse.from_entity(record) for record in result.results],
            after=result.after,
            before=result.before,
        )
