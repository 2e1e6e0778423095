"""Aggregate application use cases."""

from .security_events import (
    RequestMetadata,
    SecurityEventLogger,
    get_request_metadata,
    security_event_logger,
)

__all__ = [
    "RequestMetadata",
    "SecurityEventLogger",
    "get_request_metadata",
    "security_event_logger",
]
