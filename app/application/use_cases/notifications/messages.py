"""In-app notification message templates."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from app.domain.entities import NotificationType

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "New activity"


def format_usd(amount_in_cents: int) -> str:
    """Format an amount in cents as US dollars, e.g. ``$1,234.56``."""

    amount = Decimal(int(amount_in_cents)) / 100
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _render(kind: NotificationType, data: Mapping[str, Any]) -> str:
    if kind is NotificationType.COST_ADDED:
        return (
            f"New cost added: {data['description']} "
            f"({format_usd(data['amount'])}) in {data['project_name']}"
        )
    elif kind is NotificationType.LARGE_EXPENSE:
        return (
            f"Large expense alert: {data['description']} "
            f"({format_usd(data['amount'])}) in {data['project_name']}"
        )
    elif kind is NotificationType.DOCUMENT_UPLOADED:
        return f"New document uploaded: {data['file_name']} in {data['project_name']}"
    elif kind is NotificationType.TIMELINE_EVENT:
        return f"New timeline event: {data['event_title']} in {data['project_name']}"
    elif kind is NotificationType.PARTNER_INVITED:
        return f"{data['inviter_name']} invited you to collaborate on {data['project_name']}"
    elif kind is NotificationType.COMMENT_ADDED:
        return (
            f"{data['commenter_name']} commented on {data['entity_type']} "
            f"in {data['project_name']}"
        )
    else:
        return FALLBACK_MESSAGE


def render_notification_message(
    notification_type: NotificationType | str, data: Mapping[str, Any]
) -> str:
    """Return the human readable message stored on a notification.

    Unknown types and data missing a template field yield ``FALLBACK_MESSAGE``.
    """

    try:
        kind = NotificationType(notification_type)
    except ValueError:
        return FALLBACK_MESSAGE

    try:
        return _render(kind, data)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Incomplete data for %s notification message: %r", kind.value, exc)
        return FALLBACK_MESSAGE


__all__ = ["FALLBACK_MESSAGE", "format_usd", "render_notification_message"]
