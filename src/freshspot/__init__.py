"""FreshSpot - FRESH music posts from Reddit, resolved to Spotify catalog entries."""

__version__ = "0.1.0"
