"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationEntityType, NotificationType


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    type: NotificationType
    entity_type: NotificationEntityType
    entity_id: str
    project_id: int | None = None
    message: str
    read: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UnreadCountRead(BaseModel):
    count: int


class MarkAllReadRequest(BaseModel):
    project_id: int | None = Field(default=None, description="Only mark this project's notifications")


class MarkAllReadResponse(BaseModel):
    updated: int


__all__ = [
    "MarkAllReadRequest",
    "MarkAllReadResponse",
    "NotificationRead",
    "UnreadCountRead",
]
