"""Observability infrastructure for structured logging."""

from freshspot.infrastructure.observability.log_messages import LogMessages
from freshspot.infrastructure.observability.logging import (
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)
from freshspot.infrastructure.observability.middleware import RequestLoggingMiddleware

__all__ = [
    "LogMessages",
    "RequestLoggingMiddleware",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
