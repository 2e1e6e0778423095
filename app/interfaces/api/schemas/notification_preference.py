"""Schemas for notification preference endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import DigestFrequency


class NotificationPreferenceRead(BaseModel):
    user_id: int
    email_on_cost: bool
    email_on_large_expense: bool
    email_on_document: bool
    email_on_timeline: bool
    email_digest_frequency: DigestFrequency
    timezone: str
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class NotificationPreferenceUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    email_on_cost: bool | None = None
    email_on_large_expense: bool | None = None
    email_on_document: bool | None = None
    email_on_timeline: bool | None = None
    email_digest_frequency: DigestFrequency | None = None
    timezone: str | None = Field(default=None, min_length=1, max_length=64)

    model_config = ConfigDict(extra="forbid")


class UnsubscribeResponse(BaseModel):
    success: bool = True
    message: str


__all__ = [
    "NotificationPreferenceRead",
    "NotificationPreferenceUpdate",
    "UnsubscribeResponse",
]
