"""Infrastructure layer: HTTP clients, persistence, observability and app lifecycle."""
