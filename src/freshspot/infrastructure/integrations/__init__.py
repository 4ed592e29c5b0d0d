"""External service integrations (Reddit feed, Spotify catalog)."""

from freshspot.infrastructure.integrations.reddit_client import RedditClient
from freshspot.infrastructure.integrations.spotify_client import SpotifyClient

__all__ = ["RedditClient", "SpotifyClient"]
