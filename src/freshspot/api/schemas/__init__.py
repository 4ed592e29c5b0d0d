"""API request/response schemas."""

from freshspot.api.schemas.items import (
    CatalogInfoResponse,
    CatalogLinkResponse,
    DirectRefResponse,
    ItemsResponse,
    RedditInfoResponse,
    ResolvedItemResponse,
)

__all__ = [
    "CatalogInfoResponse",
    "CatalogLinkResponse",
    "DirectRefResponse",
    "ItemsResponse",
    "RedditInfoResponse",
    "ResolvedItemResponse",
]
