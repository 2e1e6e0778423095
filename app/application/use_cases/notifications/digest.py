"""Scheduling of digest delivery slots."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo

from zoneinfo import ZoneInfoNotFoundError

from app.domain.entities import DigestType
from app.utils import resolve_timezone, utc_now

logger = logging.getLogger(__name__)

DIGEST_HOUR = 8


def calculate_next_digest_time(
    digest_type: DigestType | str,
    timezone_name: str,
    *,
    now: datetime | None = None,
) -> datetime:
    """Return the UTC instant of the next digest slot for a user.

    Daily digests go out at 08:00 local time, today if that is still ahead and
    tomorrow otherwise. Weekly digests go out at 08:00 local time on the next
    Monday after today. Unknown timezones are logged and the slot is computed
    in UTC instead.

    DST transitions at 08:00 are resolved by :mod:`zoneinfo` (``fold=0``).
    """

    current = now or utc_now()
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)

    try:
        zone = resolve_timezone(timezone_name)
    except ZoneInfoNotFoundError as exc:
        logger.warning(
            "Invalid timezone %r, falling back to UTC: %s", timezone_name, exc
        )
        zone = timezone.utc

    return _next_slot(DigestType(digest_type), zone, current)


def _next_slot(digest_type: DigestType, zone: tzinfo, now: datetime) -> datetime:
    local_now = now.astimezone(zone)
    if digest_type is DigestType.DAILY:
        scheduled = _at_digest_hour(local_now)
        if not scheduled > local_now:
            scheduled = _at_digest_hour(local_now + timedelta(days=1))
    else:
        days_until_monday = 7 - local_now.weekday()
        scheduled = _at_digest_hour(local_now + timedelta(days=days_until_monday))
    return scheduled.astimezone(timezone.utc)


def _at_digest_hour(value: datetime) -> datetime:
    return value.replace(hour=DIGEST_HOUR, minute=0, second=0, microsecond=0)


__all__ = ["DIGEST_HOUR", "calculate_next_digest_time"]
