"""Domain entity representing an in-app notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Project activities that produce notifications."""

    COST_ADDED = "cost_added"
    LARGE_EXPENSE = "large_expense"
    DOCUMENT_UPLOADED = "document_uploaded"
    TIMELINE_EVENT = "timeline_event"
    PARTNER_INVITED = "partner_invited"
    COMMENT_ADDED = "comment_added"


class NotificationEntityType(str, Enum):
    """Kind of record a notification points at."""

    COST = "cost"
    DOCUMENT = "document"
    EVENT = "event"
    PROJECT = "project"


@dataclass
class Notification:
    """Message delivered to a specific user about project activity."""

    id: int | None
    user_id: int
    type: NotificationType
    entity_type: NotificationEntityType
    entity_id: str
    project_id: int | None
    message: str
    read: bool = False
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationEntityType", "NotificationType"]
