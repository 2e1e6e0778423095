"""Use cases backing the in-app notification inbox."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Notification
from app.infrastructure.repositories import NotificationRepository

MAX_PAGE_SIZE = 100


def list_notifications(
    session: Session,
    *,
    user_id: int,
    limit: int = 50,
    offset: int = 0,
    unread_only: bool = False,
    project_id: int | None = None,
) -> Sequence[Notification]:
    """Return the user's notifications, newest first."""

    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    if offset < 0:
        raise ValueError("offset must not be negative")
    return NotificationRepository(session).list_for_user(
        user_id,
        limit=limit,
        offset=offset,
        unread_only=unread_only,
        project_id=project_id,
    )


def count_unread_notifications(session: Session, *, user_id: int) -> int:
    return NotificationRepository(session).count_unread(user_id)


def mark_notification_as_read(
    session: Session, *, notification_id: int, user_id: int
) -> Notification:
    """Mark one of the user's notifications as read.

    Raises ``ValueError`` when the notification does not exist and
    ``PermissionError`` when it belongs to somebody else.
    """

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise ValueError("Notification not found")
    if notification.user_id != user_id:
        raise PermissionError("You do not have access to this notification")
    if not notification.read:
        repository.mark_as_read(notification_id, user_id=user_id)
        notification.read = True
    return notification


def mark_all_notifications_as_read(
    session: Session, *, user_id: int, project_id: int | None = None
) -> int:
    """Mark every unread notification of the user as read and return how many changed."""

    return NotificationRepository(session).mark_all_as_read(user_id, project_id=project_id)


__all__ = [
    "MAX_PAGE_SIZE",
    "count_unread_notifications",
    "list_notifications",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
]
