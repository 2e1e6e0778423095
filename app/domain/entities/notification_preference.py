"""Domain entity describing how a user wants to receive emails."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DigestFrequency(str, Enum):
    """Delivery cadence for notification emails."""

    IMMEDIATE = "immediate"
    DAILY = "daily"
    WEEKLY = "weekly"
    NEVER = "never"


@dataclass
class NotificationPreference:
    """Per-user email switches, digest cadence and timezone."""

    user_id: int
    email_on_cost: bool = True
    email_on_large_expense: bool = True
    email_on_document: bool = True
    email_on_timeline: bool = True
    email_digest_frequency: DigestFrequency = DigestFrequency.IMMEDIATE
    timezone: str = "Australia/Sydney"
    updated_at: datetime | None = None

    @classmethod
    def defaults(cls, user_id: int, *, timezone: str | None = None) -> "NotificationPreference":
        """Return the preferences assumed when the user never saved any."""

        if timezone:
            return cls(user_id=user_id, timezone=timezone)
        return cls(user_id=user_id)


__all__ = ["DigestFrequency", "NotificationPreference"]
