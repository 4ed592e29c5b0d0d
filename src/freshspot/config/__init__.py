"""Configuration module for FreshSpot."""

from .settings import (
    DatabaseSettings,
    LogSettings,
    RedditSettings,
    Settings,
    SpotifySettings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "LogSettings",
    "RedditSettings",
    "Settings",
    "SpotifySettings",
    "get_settings",
]
