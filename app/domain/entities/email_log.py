"""Domain entity recording an email delivery attempt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EmailStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


@dataclass
class EmailLog:
    """Write-once audit row for a single send attempt."""

    id: int | None
    user_id: int
    notification_id: int | None
    email_type: str
    recipient_email: str
    subject: str
    status: EmailStatus
    provider_message_id: str | None = None
    attempts: int = 1
    last_error: str | None = None
    sent_at: datetime | None = None


__all__ = ["EmailLog", "EmailStatus"]
