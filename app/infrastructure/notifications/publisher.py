"""Utility helpers to push new notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from anyio import from_thread

from app.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, notification: Notification) -> None:
        """Schedule ``notification`` to be delivered to its user, if connected."""

        if not self._manager.has_connections(notification.user_id):
            return

        message = {"type": "notification", "data": serialize_notification(notification)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_user, notification.user_id, message)
            except RuntimeError as exc:
                # Not inside an event loop worker thread (scripts, background jobs).
                logger.debug("Skipping realtime push for %s: %s", notification.user_id, exc)
        else:
            loop.create_task(
                self._manager.send_to_user(notification.user_id, message)
            )

    def dispatch_many(self, notifications: Iterable[Notification]) -> None:
        for notification in notifications:
            self.dispatch(notification)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type.value,
        "entity_type": notification.entity_type.value,
        "entity_id": notification.entity_id,
        "project_id": notification.project_id,
        "message": notification.message,
        "read": notification.read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


notification_publisher = NotificationPublisher(notification_manager)


def dispatch_notifications(notifications: Iterable[Notification]) -> None:
    """Public helper that delegates to the shared publisher instance."""

    notification_publisher.dispatch_many(notifications)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "dispatch_notifications",
    "serialize_notification",
]
