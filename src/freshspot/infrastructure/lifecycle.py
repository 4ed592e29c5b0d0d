"""Application lifecycle management for startup and shutdown tasks.

This module handles the FastAPI lifespan context manager: logging setup, the resolution
cache database and the two shared HTTP clients (Reddit, Spotify).
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from freshspot.config import Settings, get_settings
from freshspot.domain.exceptions import ConfigurationError
from freshspot.infrastructure.integrations import RedditClient, SpotifyClient
from freshspot.infrastructure.observability import configure_logging
from freshspot.infrastructure.persistence import Database

logger = logging.getLogger(__name__)


# Hey future me, this validates SQLite paths BEFORE we try creating the DB engine! SQLite needs to
# create temp files (-journal, -wal) next to the .db file, so the parent directory must exist and be
# writable. We DON'T pre-create the .db file - SQLite initializes it on first connection.
# Returns early for PostgreSQL and :memory:. Failures become ConfigurationError and the app won't
# start, which beats a cryptic "unable to open database file" on the first request.
def _validate_sqlite_path(settings: Settings) -> None:
    """Validate SQLite database path accessibility before engine creation."""
    db_path = settings._get_sqlite_db_path()
    if db_path is None:
        return

    try:
        if db_path.parent and str(db_path.parent) != ".":
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug("Ensured SQLite parent directory exists: %s", db_path.parent)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to create SQLite database directory '{db_path.parent}': {exc}. "
            "Update DATABASE__URL or adjust directory permissions."
        ) from exc

    try:
        test_file = db_path.parent / f".{db_path.stem}_write_test"
        test_file.write_bytes(b"test")
        test_file.unlink()
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to write files in database directory '{db_path.parent}': {exc}. "
            "SQLite requires write permissions to create database and journal files."
        ) from exc


# Listen future me, everything before `yield` runs at STARTUP, everything after at SHUTDOWN.
# Resources go on app.state so dependencies.py can hand them to requests. The finally block
# runs even when startup fails halfway, so every close() must tolerate a missing resource.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles:
    - Logging configuration
    - Database initialization (tables created for SQLite setups)
    - Shared Reddit/Spotify HTTP clients
    - Resource cleanup
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()

    configure_logging(
        log_level=settings.log.level,
        json_format=settings.log.json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s (%s)", settings.app_name, settings.app_env)

    try:
        _validate_sqlite_path(settings)

        db = Database(settings)
        app.state.db = db
        logger.info("Database initialized: %s", settings.database.url)

        # Production PostgreSQL is migrated with alembic; SQLite dev setups just get the tables.
        if db.dialect_name == "sqlite":
            await db.create_tables()
            logger.info("SQLite tables ensured")

        app.state.reddit_client = RedditClient(settings.reddit)
        app.state.spotify_client = SpotifyClient(settings.spotify)
        logger.info("HTTP clients ready (reddit=%s)", settings.reddit.base_url)

        yield

    except Exception as e:
        logger.exception("Error during application lifecycle: %s", e)
        raise
    finally:
        logger.info("Shutting down application")

        for name in ("reddit_client", "spotify_client"):
            client = getattr(app.state, name, None)
            if client is not None:
                try:
                    await client.close()
                    logger.info("%s closed", name)
                except Exception as e:
                    logger.exception("Error closing %s: %s", name, e)

        try:
            if hasattr(app.state, "db"):
                await app.state.db.close()
                logger.info("Database connection closed")
        except Exception as e:
            logger.exception("Error closing database: %s", e)
