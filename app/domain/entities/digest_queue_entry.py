"""Domain entity for notifications waiting for a digest email."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DigestType(str, Enum):
    """Digest batches a notification can be deferred to."""

    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass
class DigestQueueEntry:
    """A deferred notification scheduled for a digest delivery slot."""

    id: int | None
    user_id: int
    notification_id: int
    digest_type: DigestType
    scheduled_for: datetime
    processed: bool = False
    processed_at: datetime | None = None
    created_at: datetime | None = None


__all__ = ["DigestQueueEntry", "DigestType"]
