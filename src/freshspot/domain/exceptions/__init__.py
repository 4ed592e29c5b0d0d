"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so code can inspect it without parsing
    # str(exception). Don't raise this directly - always use a specific subclass so callers
    # can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class FetchError(DomainException):
    """The forum feed could not be fetched or its payload is malformed.

    Fatal for the request that triggered it: no page means nothing to resolve.

    HTTP Status: 502 (Bad Gateway)
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class MalformedReference(DomainException):
    """A catalog link embedded in a post cannot be parsed.

    Only the offending post is dropped; the rest of the page continues.
    """

    def __init__(self, text: str) -> None:
        super().__init__(f"No catalog reference found in {text[:80]!r}")
        self.text = text


class EnrichmentFailure(DomainException):
    """A catalog record lacks the fields needed to build CatalogInfo.

    The item is dropped and logged but NOT cached as unresolved, so the next
    request will look it up again.
    """

    def __init__(self, item_id: str, reason: str) -> None:
        super().__init__(f"Could not enrich item {item_id}: {reason}")
        self.item_id = item_id
        self.reason = reason


class CatalogLookupFailure(DomainException):
    """A whole catalog call (bulk lookup or search) failed.

    Every item riding on that call is dropped; sibling calls are unaffected.

    HTTP Status: 502 (Bad Gateway) if it ever reaches the API layer
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ConfigurationError(DomainException):
    """Application misconfiguration.

    HTTP Status: 503 (Service Unavailable)

    Example:
        raise ConfigurationError("Unable to create SQLite database directory")
    """

    pass


class AuthenticationError(DomainException):
    """No catalog credential was supplied with the request.

    HTTP Status: 401
    """

    pass


__all__ = [
    "AuthenticationError",
    "CatalogLookupFailure",
    "ConfigurationError",
    "DomainException",
    "EnrichmentFailure",
    "FetchError",
    "MalformedReference",
]
