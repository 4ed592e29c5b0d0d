"""Resolved feed endpoint."""

import logging

from fastapi import APIRouter, Depends, Query

from freshspot.api.dependencies import get_catalog_credential, get_resolution_pipeline
from freshspot.api.schemas import ItemsResponse
from freshspot.application.services import ResolutionPipeline
from freshspot.config import Settings, get_settings
from freshspot.domain.entities import FeedQuery, RequestKind

logger = logging.getLogger(__name__)

router = APIRouter(tags=["items"])


# Hey future me, this is the ONLY endpoint the frontend talks to. Query params mirror Reddit's
# own search params (sort, t, after, before) so the frontend can page through exactly like on
# Reddit. `q=album` switches to the album feed, anything else means the general "fresh" feed.
# Errors: FetchError -> 502 and missing Authorization -> 401, both via exception_handlers.py.
@router.get("/items", response_model=ItemsResponse)
async def get_items(
    subreddit: str | None = Query(
        default=None, description="Subreddit path, e.g. r/hiphopheads"
    ),
    q: str | None = Query(default=None, description="'album' for the album feed"),
    sort: str = Query(default="new", description="Reddit sort order"),
    t: str = Query(default="week", description="Reddit time range"),
    page: int = Query(default=0, ge=0, description="Zero-based page index"),
    after: str | None = Query(default=None, description="Reddit 'after' cursor"),
    before: str | None = Query(default=None, description="Reddit 'before' cursor"),
    credential: str = Depends(get_catalog_credential),
    pipeline: ResolutionPipeline = Depends(get_resolution_pipeline),
    settings: Settings = Depends(get_settings),
) -> ItemsResponse:
    """Get one page of resolved FRESH posts.

    Returns:
        Resolved items in feed order plus after/before cursors
    """
    query = FeedQuery(
        subreddit=subreddit or settings.reddit.default_subreddit,
        request_kind=RequestKind.from_query(q),
        sort=sort,
        time_range=t,
        page=page,
        after=after,
        before=before,
    )
    result = await pipeline.run(query, credential)
    return ItemsResponse.from_result(result)
