"""Per-user cap on immediate notification emails.

Each user gets a fixed window (one hour by default) that opens with the first
email sent after the previous window expired. Once ``max_emails`` have been
sent inside the window further non-bypass emails are refused until it ends.
Bypass checks (large expense alerts) are always allowed and never counted.

The window arithmetic lives in :class:`EmailRateLimiter`; counters are kept in
a :class:`RateLimitStore`. The in-memory store is process-local and is lost on
restart. Deployments running several processes should configure
``REDIS_URL`` so every process shares one counter per user.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

import redis

from app.config import get_settings
from app.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    count: int
    reset_at: datetime


@dataclass(frozen=True)
class RateLimitStatus:
    """Diagnostic view of a user's current window."""

    count: int
    reset_at: datetime | None


class RateLimitStore(Protocol):
    def try_acquire(self, user_id: str, *, limit: int, window: timedelta, now: datetime) -> bool:
        """Count one email for ``user_id`` unless the window is already full."""

    def current(self, user_id: str, *, now: datetime) -> RateLimitEntry | None:
        """Return the live window for ``user_id`` or ``None`` when expired."""

    def reset(self, user_id: str) -> None: ...

    def clear(self) -> None: ...

    def cleanup(self, *, now: datetime) -> int: ...


class InMemoryRateLimitStore:
    """Dictionary backed store guarded by a lock."""

    def __init__(self) -> None:
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def try_acquire(self, user_id: str, *, limit: int, window: timedelta, now: datetime) -> bool:
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None or now > entry.reset_at:
                self._entries[user_id] = RateLimitEntry(count=1, reset_at=now + window)
                return True
            if entry.count >= limit:
                return False
            entry.count += 1
            return True

    def current(self, user_id: str, *, now: datetime) -> RateLimitEntry | None:
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None or now > entry.reset_at:
                return None
            return RateLimitEntry(count=entry.count, reset_at=entry.reset_at)

    def reset(self, user_id: str) -> None:
        with self._lock:
            self._entries.pop(user_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup(self, *, now: datetime) -> int:
        with self._lock:
            expired = [user_id for user_id, entry in self._entries.items() if now > entry.reset_at]
            for user_id in expired:
                del self._entries[user_id]
            return len(expired)


class RedisRateLimitStore:
    """Fixed window counters shared through Redis ``INCR`` + ``EXPIRE``."""

    def __init__(self, client: redis.Redis, *, prefix: str = "email-rate-limit") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimitStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def _key(self, user_id: str) -> str:
        return f"{self._prefix}:{user_id}"

    def try_acquire(self, user_id: str, *, limit: int, window: timedelta, now: datetime) -> bool:
        key = self._key(user_id)
        pipe = self._client.pipeline()
        pipe.incr(key, 1)
        pipe.pttl(key)
        count, ttl = pipe.execute()

        if ttl is None or int(ttl) < 0:
            self._client.pexpire(key, int(window.total_seconds() * 1000))

        if int(count) > limit:
            # Refused attempts must not count towards the window.
            self._client.decr(key, 1)
            return False
        return True

    def current(self, user_id: str, *, now: datetime) -> RateLimitEntry | None:
        key = self._key(user_id)
        pipe = self._client.pipeline()
        pipe.get(key)
        pipe.pttl(key)
        count, ttl = pipe.execute()
        if count is None or ttl is None or int(ttl) < 0:
            return None
        return RateLimitEntry(count=int(count), reset_at=now + timedelta(milliseconds=int(ttl)))

    def reset(self, user_id: str) -> None:
        self._client.delete(self._key(user_id))

    def clear(self) -> None:
        keys = list(self._client.scan_iter(match=f"{self._prefix}:*"))
        if keys:
            self._client.delete(*keys)

    def cleanup(self, *, now: datetime) -> int:
        # Redis expires keys on its own.
        return 0


class EmailRateLimiter:
    """Limit immediate emails to ``max_emails`` per user and window."""

    def __init__(
        self,
        max_emails: int = 10,
        window: timedelta = timedelta(hours=1),
        *,
        store: RateLimitStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.max_emails = max_emails
        self.window = window
        self._store: RateLimitStore = store or InMemoryRateLimitStore()
        self._clock = clock or utc_now

    def can_send_email(self, user_id: int | str, is_bypass: bool = False) -> bool:
        """Return ``True`` when an email may be sent to ``user_id`` right now."""

        if is_bypass:
            return True
        return self._store.try_acquire(
            str(user_id), limit=self.max_emails, window=self.window, now=self._clock()
        )

    def get_current_count(self, user_id: int | str) -> RateLimitStatus:
        entry = self._store.current(str(user_id), now=self._clock())
        if entry is None:
            return RateLimitStatus(count=0, reset_at=None)
        return RateLimitStatus(count=entry.count, reset_at=entry.reset_at)

    def reset(self, user_id: int | str) -> None:
        self._store.reset(str(user_id))

    def clear_all(self) -> None:
        self._store.clear()

    def cleanup_expired_entries(self) -> int:
        """Drop expired windows and return how many were removed."""

        return self._store.cleanup(now=self._clock())


def build_email_rate_limiter() -> EmailRateLimiter:
    """Create the limiter described by the application settings."""

    settings = get_settings()
    store: RateLimitStore | None = None
    if settings.redis_url:
        logger.info("Sharing email rate limits through Redis")
        store = RedisRateLimitStore.from_url(settings.redis_url)
    return EmailRateLimiter(
        max_emails=settings.email_rate_limit_max,
        window=timedelta(seconds=settings.email_rate_limit_window_seconds),
        store=store,
    )


email_rate_limiter = build_email_rate_limiter()


__all__ = [
    "EmailRateLimiter",
    "InMemoryRateLimitStore",
    "RateLimitStatus",
    "RateLimitStore",
    "RedisRateLimitStore",
    "build_email_rate_limiter",
    "email_rate_limiter",
]
