"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    The timezone is resolved using the ``APP_TIMEZONE`` environment variable.
    If the provided value cannot be resolved, UTC is used as a fallback.
    """

    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    try:
        return resolve_timezone(tz_name)
    except ZoneInfoNotFoundError:
        return timezone.utc


def utc_now() -> datetime:
    """Return the current instant as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime.

    Naive values are assumed to already be expressed in UTC, which is how they
    are stored in the database.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_naive_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` converted to UTC without attaching ``tzinfo``.

    SQLite and several SQL Server column types do not keep offsets, so every
    timestamp is persisted as naive UTC and re-attached on the way out.
    """

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.replace(tzinfo=None)


def naive_utc_now() -> datetime:
    """Column default producing the current naive UTC timestamp."""

    return utc_now().replace(tzinfo=None)


def resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve ``tz_name`` into a ``tzinfo`` instance.

    IANA names and fixed ``UTC+10`` / ``GMT-03:30`` style offsets are accepted.
    Anything else raises :class:`ZoneInfoNotFoundError`.
    """

    name = (tz_name or "").strip()
    if not name:
        raise ZoneInfoNotFoundError("Empty timezone name")

    match = _OFFSET_PATTERN.match(name)
    if match:
        sign = -1 if match.group("sign") == "-" else 1
        hours = int(match.group("hours"))
        minutes = int(match.group("minutes") or 0)
        if minutes >= 60:
            raise ZoneInfoNotFoundError(f"Invalid UTC offset: {name!r}")
        try:
            return timezone(sign * timedelta(hours=hours, minutes=minutes))
        except ValueError as exc:
            raise ZoneInfoNotFoundError(f"Invalid UTC offset: {name!r}") from exc

    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        raise
    except (ValueError, OSError) as exc:
        raise ZoneInfoNotFoundError(f"Invalid timezone name: {name!r}") from exc


def is_valid_timezone(tz_name: str) -> bool:
    """Return ``True`` when ``tz_name`` can be resolved."""

    try:
        resolve_timezone(tz_name)
    except ZoneInfoNotFoundError:
        return False
    return True
