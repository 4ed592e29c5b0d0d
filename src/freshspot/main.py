"""FastAPI application factory.

Run with:
    uvicorn freshspot.main:app --reload
"""

from fastapi import FastAPI

from freshspot.api.exception_handlers import register_exception_handlers
from freshspot.api.routers import api_router, health
from freshspot.config import Settings, get_settings
from freshspot.infrastructure.lifecycle import lifespan
from freshspot.infrastructure.observability import RequestLoggingMiddleware


# Hey future me - passing `settings` pins them for this app instance: the lifespan reads them from
# app.state and every Depends(get_settings) gets them via dependency_overrides. Without it we use
# the cached env-based get_settings(), same as production.
def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="FreshSpot",
        description="FRESH music posts from Reddit, resolved to Spotify",
        version="0.1.0",
        lifespan=lifespan,
    )

    if settings is not None:
        app.state.settings = settings
        app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
