"""API router initialization."""

# Hey future me, this is the API router aggregator mounted at /api in main.py, so endpoints become
# /api/items. The health router is NOT in here - probes live at the root (/health) where
# Docker/K8s expect them.

from fastapi import APIRouter

from freshspot.api.routers import health, items

api_router = APIRouter()
api_router.include_router(items.router)

__all__ = ["api_router", "health", "items"]
