"""Custom exception handlers for FastAPI application.

This module registers global exception handlers that convert domain exceptions
into proper HTTP responses with appropriate status codes.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from freshspot.domain.exceptions import (
    AuthenticationError,
    CatalogLookupFailure,
    ConfigurationError,
    FetchError,
)

logger = logging.getLogger(__name__)


# Hey future me, this registers GLOBAL exception handlers for the entire app! The pipeline handles
# per-item failures itself; only whole-request failures get here. Without these, a dead Reddit
# would surface as a 500 with a stack trace. Must be called during app setup BEFORE requests arrive.
def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for domain exceptions.

    - FetchError -> 502 (Reddit page unavailable)
    - CatalogLookupFailure -> 502 (only if it ever escapes the pipeline)
    - AuthenticationError -> 401 (no Spotify credential)
    - ConfigurationError -> 503

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(FetchError)
    async def fetch_error_handler(request: Request, exc: FetchError) -> JSONResponse:
        """Handle feed fetch failures with 502 Bad Gateway."""
        logger.error(
            "Feed fetch failed at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "url": exc.url, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": exc.message},
        )

    @app.exception_handler(CatalogLookupFailure)
    async def catalog_lookup_failure_handler(
        request: Request, exc: CatalogLookupFailure
    ) -> JSONResponse:
        """Handle catalog failures with 502 Bad Gateway."""
        logger.error(
            "Catalog lookup failed at %s: %s",
            request.url.path,
            exc.message,
            extra={
                "path": request.url.path,
                "url": exc.url,
                "status_code": exc.status_code,
            },
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": exc.message},
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        """Handle missing credentials with 401 Unauthorized."""
        logger.info(
            "Authentication required at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        """Handle configuration errors with 503 Service Unavailable."""
        logger.error(
            "Configuration error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message},
        )
