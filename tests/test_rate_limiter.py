"""Tests for the per-user email rate limiter."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.infrastructure.notifications.rate_limiter import (
    EmailRateLimiter,
    InMemoryRateLimitStore,
    RedisRateLimitStore,
)

START = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def limiter(clock: FakeClock) -> EmailRateLimiter:
    return EmailRateLimiter(max_emails=3, window=timedelta(hours=1), clock=clock)


def test_allows_up_to_the_cap_then_refuses(limiter: EmailRateLimiter) -> None:
    assert [limiter.can_send_email(7) for _ in range(4)] == [True, True, True, False]
    assert limiter.get_current_count(7).count == 3


def test_refused_attempts_leave_the_window_untouched(limiter, clock) -> None:
    for _ in range(3):
        limiter.can_send_email(7)
    before = limiter.get_current_count(7)
    clock.advance(minutes=10)
    assert limiter.can_send_email(7) is False
    assert limiter.get_current_count(7) == before


def test_window_reopens_only_after_reset_time(limiter, clock) -> None:
    for _ in range(3):
        limiter.can_send_email(7)

    clock.advance(hours=1)
    # Exactly at reset_at the old window still applies.
    assert limiter.can_send_email(7) is False

    clock.advance(seconds=1)
    assert limiter.can_send_email(7) is True
    status = limiter.get_current_count(7)
    assert status.count == 1
    assert status.reset_at == clock.now + timedelta(hours=1)


def test_bypass_is_always_allowed_and_not_counted(limiter) -> None:
    for _ in range(3):
        limiter.can_send_email(7)
    assert limiter.can_send_email(7, is_bypass=True) is True
    assert limiter.get_current_count(7).count == 3
    assert limiter.can_send_email(8, is_bypass=True) is True
    assert limiter.get_current_count(8).count == 0


def test_users_are_limited_independently(limiter) -> None:
    for _ in range(3):
        limiter.can_send_email(1)
    assert limiter.can_send_email(1) is False
    assert limiter.can_send_email(2) is True


def test_missing_or_expired_entries_report_zero(limiter, clock) -> None:
    status = limiter.get_current_count(99)
    assert status.count == 0
    assert status.reset_at is None

    limiter.can_send_email(99)
    clock.advance(hours=2)
    assert limiter.get_current_count(99).count == 0


def test_reset_and_clear_all(limiter) -> None:
    for user_id in (1, 2):
        for _ in range(3):
            limiter.can_send_email(user_id)

    limiter.reset(1)
    assert limiter.can_send_email(1) is True
    assert limiter.can_send_email(2) is False

    limiter.clear_all()
    assert limiter.get_current_count(2).count == 0


def test_cleanup_removes_only_expired_windows(limiter, clock) -> None:
    limiter.can_send_email(1)
    clock.advance(minutes=30)
    limiter.can_send_email(2)
    clock.advance(minutes=31)

    assert limiter.cleanup_expired_entries() == 1
    assert limiter.get_current_count(2).count == 1


def test_in_memory_store_is_the_default() -> None:
    limiter = EmailRateLimiter()
    assert limiter.max_emails == 10
    assert limiter.window == timedelta(hours=1)
    assert isinstance(limiter._store, InMemoryRateLimitStore)


class FakePipeline:
    def __init__(self, client: "FakeRedis") -> None:
        self._client = client
        self._ops: list[tuple[str, str]] = []

    def incr(self, key, amount=1):
        self._ops.append(("incr", key))
        return self

    def pttl(self, key):
        self._ops.append(("pttl", key))
        return self

    def get(self, key):
        self._ops.append(("get", key))
        return self

    def execute(self):
        results = []
        for op, key in self._ops:
            if op == "incr":
                results.append(self._client.incr(key))
            elif op == "pttl":
                results.append(self._client.pttl(key))
            else:
                results.append(self._client.get(key))
        return results


class FakeRedis:
    """Minimal in-process stand-in for the redis commands the store uses."""

    def __init__(self) -> None:
        self.values: dict[str, int] = {}
        self.ttls: dict[str, int] = {}

    def pipeline(self):
        return FakePipeline(self)

    def incr(self, key, amount=1):
        self.values[key] = self.values.get(key, 0) + amount
        return self.values[key]

    def decr(self, key, amount=1):
        self.values[key] -= amount
        return self.values[key]

    def get(self, key):
        value = self.values.get(key)
        return None if value is None else str(value)

    def pttl(self, key):
        if key not in self.values:
            return -2
        return self.ttls.get(key, -1)

    def pexpire(self, key, ms):
        self.ttls[key] = ms
        return True

    def delete(self, *keys):
        for key in keys:
            self.values.pop(key, None)
            self.ttls.pop(key, None)
        return len(keys)

    def scan_iter(self, match=None):
        prefix = (match or "").rstrip("*")
        return [key for key in list(self.values) if key.startswith(prefix)]


def test_redis_store_counts_in_a_shared_window(clock) -> None:
    client = FakeRedis()
    limiter = EmailRateLimiter(
        max_emails=2, window=timedelta(minutes=5), store=RedisRateLimitStore(client), clock=clock
    )

    assert limiter.can_send_email(5) is True
    assert client.ttls["email-rate-limit:5"] == 300_000
    assert limiter.can_send_email(5) is True
    assert limiter.can_send_email(5) is False
    assert client.values["email-rate-limit:5"] == 2

    status = limiter.get_current_count(5)
    assert status.count == 2
    assert status.reset_at == clock.now + timedelta(minutes=5)

    limiter.clear_all()
    assert client.values == {}
