"""Delivery helpers for notifications: realtime push, email throttling and background jobs."""

from .background import run_with_session
from .manager import NotificationConnectionManager, notification_manager
from .publisher import (
    NotificationPublisher,
    dispatch_notifications,
    notification_publisher,
    serialize_notification,
)
from .rate_limiter import (
    EmailRateLimiter,
    InMemoryRateLimitStore,
    RateLimitStatus,
    RedisRateLimitStore,
    email_rate_limiter,
)

__all__ = [
    "EmailRateLimiter",
    "InMemoryRateLimitStore",
    "NotificationConnectionManager",
    "NotificationPublisher",
    "RateLimitStatus",
    "RedisRateLimitStore",
    "dispatch_notifications",
    "email_rate_limiter",
    "notification_manager",
    "notification_publisher",
    "run_with_session",
    "serialize_notification",
]
