"""Application settings loaded from environment variables and `.env`.

Nested sections use a double underscore, e.g. `DATABASE__URL=postgresql+asyncpg://...`
or `SPOTIFY__ALBUM_BATCH_SIZE=10`.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_format: bool = False


class DatabaseSettings(BaseModel):
    """Resolution cache database configuration."""

    url: str = "sqlite+aiosqlite:///./freshspot.db"
    echo: bool = False
    pool_pre_ping: bool = True
    # Only applied for PostgreSQL
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 3600


class RedditSettings(BaseModel):
    """Forum feed source configuration."""

    base_url: str = "https://www.reddit.com"
    default_subreddit: str = "r/hiphopheads"
    # Reddit throttles the default python-httpx user agent hard
    user_agent: str = "freshspot/0.1 (release aggregator)"
    timeout: float = 30.0


# Hey future me - the batch ceilings are Spotify's, not ours! GET /albums takes at most 20 ids,
# GET /tracks at most 50. Lowering them is fine (tests do), raising them gets you a 400.
class SpotifySettings(BaseModel):
    """Catalog service configuration."""

    api_base_url: str = "https://api.spotify.com/v1"
    album_batch_size: int = Field(default=20, ge=1, le=20)
    track_batch_size: int = Field(default=50, ge=1, le=50)
    timeout: float = 30.0


class Settings(BaseSettings):
    """FreshSpot settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = "freshspot"
    app_env: Literal["development", "production", "test"] = "development"

    log: LogSettings = Field(default_factory=LogSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    reddit: RedditSettings = Field(default_factory=RedditSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)

    def _get_sqlite_db_path(self) -> Path | None:
        """Filesystem path of the SQLite database, None for other backends or :memory:."""
        url = self.database.url
        if not url.startswith("sqlite"):
            return None
        _, _, path = url.partition(":///")
        if not path or path == ":memory:":
            return None
        return Path(path)


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
