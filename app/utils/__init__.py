"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_naive_utc,
    ensure_utc,
    get_app_timezone,
    is_valid_timezone,
    naive_utc_now,
    resolve_timezone,
    utc_now,
)

__all__ = [
    "ensure_naive_utc",
    "ensure_utc",
    "get_app_timezone",
    "is_valid_timezone",
    "naive_utc_now",
    "resolve_timezone",
    "utc_now",
]
