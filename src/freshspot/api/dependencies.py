"""Dependency injection for API endpoints."""

import logging
from collections.abc import AsyncGenerator
from typing import cast

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from freshspot.application.services import ResolutionPipeline
from freshspot.config import Settings, get_settings
from freshspot.domain.exceptions import AuthenticationError
from freshspot.infrastructure.integrations import RedditClient, SpotifyClient
from freshspot.infrastructure.persistence import Database, ResolvedItemRepository

logger = logging.getLogger(__name__)


# Hey future me - this is a FastAPI dependency that yields a DB session to endpoints.
# session_scope() commits when the request handler returns and rolls back if it raised,
# so the pipeline's cache writes land exactly once per successful request.
# Use this in endpoint params like: "session: AsyncSession = Depends(get_db_session)"
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state."""
    db: Database = request.app.state.db
    async with db.session_scope() as session:
        yield session


# Hey future me, both HTTP clients are created ONCE in lifespan() and shared by every request
# (connection pooling). If they're missing from app.state, startup went wrong -> 503.
def get_reddit_client(request: Request) -> RedditClient:
    """Get the shared Reddit client from app state.

    Raises:
        HTTPException: 503 if the client was not initialized
    """
    if not hasattr(request.app.state, "reddit_client"):
        raise HTTPException(status_code=503, detail="Reddit client not initialized")
    return cast(RedditClient, request.app.state.reddit_client)


def get_spotify_client(request: Request) -> SpotifyClient:
    """Get the shared Spotify client from app state.

    Raises:
        HTTPException: 503 if the client was not initialized
    """
    if not hasattr(request.app.state, "spotify_client"):
        raise HTTPException(status_code=503, detail="Spotify client not initialized")
    return cast(SpotifyClient, request.app.state.spotify_client)


def get_resolved_item_repository(
    session: AsyncSession = Depends(get_db_session),
) -> ResolvedItemRepository:
    """Get resolution cache repository bound to the request session."""
    return ResolvedItemRepository(session)


def get_resolution_pipeline(
    reddit_client: RedditClient = Depends(get_reddit_client),
    spotify_client: SpotifyClient = Depends(get_spotify_client),
    repository: ResolvedItemRepository = Depends(get_resolved_item_repository),
    settings: Settings = Depends(get_settings),
) -> ResolutionPipeline:
    """Assemble the resolution pipeline for one request."""
    return ResolutionPipeline(
        feed_client=reddit_client,
        catalog_client=spotify_client,
        repository=repository,
        spotify_settings=settings.spotify,
    )


# Listen up, future me - we do NOT parse, validate or refresh the Spotify token. The frontend owns
# the OAuth dance; whatever it sends in Authorization goes to Spotify byte for byte. We only
# refuse to start a pipeline run without one (it would fail every single catalog call).
async def get_catalog_credential(
    authorization: str | None = Header(default=None),
) -> str:
    """Return the caller's Authorization header value untouched.

    Raises:
        AuthenticationError: If the header is missing or blank
    """
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Authorization header with a Spotify token is required")
    return authorization
