"""Email delivery decisions for project notifications.

Every public function here runs detached from the request that created the
notification and never raises. For one recipient it decides, in order:

1. whether the user wants this category of email at all,
2. whether the email goes out now, into a digest, or not at all,
3. whether the per-user rate limit still allows an immediate email,

and then renders and sends the email and records the attempt in ``email_logs``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import (
    DigestFrequency,
    DigestQueueEntry,
    DigestType,
    EmailLog,
    EmailStatus,
    NotificationPreference,
    NotificationType,
    User,
)
from app.infrastructure import email
from app.infrastructure.email import EmailDeliveryError
from app.infrastructure.email_templates import (
    CostEmailData,
    DocumentEmailData,
    LargeExpenseEmailData,
    TimelineEventEmailData,
    render_cost_added,
    render_document_uploaded,
    render_large_expense,
    render_timeline_event,
)
from app.infrastructure.notifications import rate_limiter
from app.infrastructure.repositories import (
    DigestQueueRepository,
    EmailLogRepository,
    NotificationPreferenceRepository,
    UserRepository,
)
from app.infrastructure.security import generate_unsubscribe_token
from app.utils import utc_now

from .digest import calculate_next_digest_time

logger = logging.getLogger(__name__)


def _load_preferences(session: Session, user_id: int) -> NotificationPreference:
    stored = NotificationPreferenceRepository(session).get(user_id)
    if stored is not None:
        return stored
    return NotificationPreference.defaults(
        user_id, timezone=get_settings().default_user_timezone
    )


def _queue_for_digest(
    session: Session,
    *,
    preferences: NotificationPreference,
    notification_id: int,
) -> None:
    digest_type = DigestType(preferences.email_digest_frequency.value)
    scheduled_for = calculate_next_digest_time(digest_type, preferences.timezone)
    DigestQueueRepository(session).create(
        DigestQueueEntry(
            id=None,
            user_id=preferences.user_id,
            notification_id=notification_id,
            digest_type=digest_type,
            scheduled_for=scheduled_for,
        )
    )
    logger.info(
        "Queued notification %s for %s digest of user %s at %s",
        notification_id,
        digest_type.value,
        preferences.user_id,
        scheduled_for.isoformat(),
    )


def _record_attempt(
    session: Session,
    *,
    user: User,
    notification_id: int,
    email_type: NotificationType,
    subject: str,
    status: EmailStatus,
    provider_message_id: str | None = None,
    last_error: str | None = None,
) -> None:
    EmailLogRepository(session).create(
        EmailLog(
            id=None,
            user_id=user.id,
            notification_id=notification_id,
            email_type=email_type.value,
            recipient_email=user.email,
            subject=subject,
            status=status,
            provider_message_id=provider_message_id,
            last_error=last_error,
            sent_at=utc_now(),
        )
    )


def _deliver(
    session: Session,
    *,
    user_id: int,
    notification_id: int,
    email_type: NotificationType,
    enabled: Callable[[NotificationPreference], bool],
    build_payload: Callable[[User, str], Any],
    subject_for: Callable[[Any], str],
    send: Callable[[Any], str | None],
    urgent: bool = False,
) -> None:
    preferences = _load_preferences(session, user_id)
    if not enabled(preferences):
        return

    user = UserRepository(session).get(user_id)
    if user is None or not user.email:
        logger.warning(
            "Skipping %s email for notification %s: user %s not found",
            email_type.value,
            notification_id,
            user_id,
        )
        return

    if not urgent:
        frequency = preferences.email_digest_frequency
        if frequency is DigestFrequency.NEVER:
            return
        if frequency in (DigestFrequency.DAILY, DigestFrequency.WEEKLY):
            _queue_for_digest(
                session, preferences=preferences, notification_id=notification_id
            )
            return

    if not rate_limiter.email_rate_limiter.can_send_email(user_id, is_bypass=urgent):
        logger.warning(
            "Rate limit reached for user %s; %s email for notification %s not sent",
            user_id,
            email_type.value,
            notification_id,
        )
        return

    payload = build_payload(user, generate_unsubscribe_token(user_id))
    subject = subject_for(payload)
    try:
        message_id = send(payload)
    except EmailDeliveryError as exc:
        _record_attempt(
            session,
            user=user,
            notification_id=notification_id,
            email_type=email_type,
            subject=subject,
            status=EmailStatus.FAILED,
            last_error=str(exc),
        )
        logger.error(
            "Failed to send %s email to user %s: %s", email_type.value, user_id, exc
        )
        return

    _record_attempt(
        session,
        user=user,
        notification_id=notification_id,
        email_type=email_type,
        subject=subject,
        status=EmailStatus.SENT,
        provider_message_id=message_id,
    )
    logger.info(
        "Sent %s email to user %s for notification %s",
        email_type.value,
        user_id,
        notification_id,
    )


def send_cost_added_email_notification(
    session: Session,
    *,
    user_id: int,
    notification_id: int,
    project_id: int,
    project_name: str,
    cost_id: str,
    cost_description: str,
    amount: int,
    user_name: str,
) -> None:
    """Email a project member about a newly recorded cost."""

    def build(user: User, token: str) -> CostEmailData:
        return CostEmailData(
            user_name=user_name or user.name,
            project_name=project_name,
            project_id=project_id,
            cost_description=cost_description,
            amount=amount,
            cost_id=str(cost_id),
            recipient_email=user.email,
            unsubscribe_token=token,
        )

    try:
        _deliver(
            session,
            user_id=user_id,
            notification_id=notification_id,
            email_type=NotificationType.COST_ADDED,
            enabled=lambda prefs: prefs.email_on_cost,
            build_payload=build,
            subject_for=lambda data: render_cost_added(data).subject,
            send=lambda data: email.send_cost_added_email(data),
        )
    except Exception:
        logger.exception("Error sending cost added email to user %s", user_id)


def send_large_expense_email_notification(
    session: Session,
    *,
    user_id: int,
    notification_id: int,
    project_id: int,
    project_name: str,
    cost_id: str,
    cost_description: str,
    amount: int,
    user_name: str,
) -> None:
    """Email a large expense alert.

    Alerts ignore the digest cadence and the rate limit, but still honour the
    user's ``email_on_large_expense`` switch.
    """

    def build(user: User, token: str) -> LargeExpenseEmailData:
        return LargeExpenseEmailData(
            user_name=user_name or user.name,
            project_name=project_name,
            project_id=project_id,
            cost_description=cost_description,
            amount=amount,
            cost_id=str(cost_id),
            recipient_email=user.email,
            unsubscribe_token=token,
        )

    try:
        _deliver(
            session,
            user_id=user_id,
            notification_id=notification_id,
            email_type=NotificationType.LARGE_EXPENSE,
            enabled=lambda prefs: prefs.email_on_large_expense,
            build_payload=build,
            subject_for=lambda data: render_large_expense(data).subject,
            send=lambda data: email.send_large_expense_email(data),
            urgent=True,
        )
    except Exception:
        logger.exception("Error sending large expense email to user %s", user_id)


def send_document_uploaded_email_notification(
    session: Session,
    *,
    user_id: int,
    notification_id: int,
    project_id: int,
    project_name: str,
    document_id: str,
    file_name: str,
    user_name: str,
) -> None:
    def build(user: User, token: str) -> DocumentEmailData:
        return DocumentEmailData(
            user_name=user_name or user.name,
            project_name=project_name,
            project_id=project_id,
            file_name=file_name,
            document_id=str(document_id),
            recipient_email=user.email,
            unsubscribe_token=token,
        )

    try:
        _deliver(
            session,
            user_id=user_id,
            notification_id=notification_id,
            email_type=NotificationType.DOCUMENT_UPLOADED,
            enabled=lambda prefs: prefs.email_on_document,
            build_payload=build,
            subject_for=lambda data: render_document_uploaded(data).subject,
            send=lambda data: email.send_document_uploaded_email(data),
        )
    except Exception:
        logger.exception("Error sending document uploaded email to user %s", user_id)


def send_timeline_event_email_notification(
    session: Session,
    *,
    user_id: int,
    notification_id: int,
    project_id: int,
    project_name: str,
    event_id: str,
    event_title: str,
    event_date: datetime,
    user_name: str,
) -> None:
    def build(user: User, token: str) -> TimelineEventEmailData:
        return TimelineEventEmailData(
            user_name=user_name or user.name,
            project_name=project_name,
            project_id=project_id,
            event_title=event_title,
            event_date=event_date,
            event_id=str(event_id),
            recipient_email=user.email,
            unsubscribe_token=token,
        )

    try:
        _deliver(
            session,
            user_id=user_id,
            notification_id=notification_id,
            email_type=NotificationType.TIMELINE_EVENT,
            enabled=lambda prefs: prefs.email_on_timeline,
            build_payload=build,
            subject_for=lambda data: render_timeline_event(data).subject,
            send=lambda data: email.send_timeline_event_email(data),
        )
    except Exception:
        logger.exception("Error sending timeline event email to user %s", user_id)


__all__ = [
    "send_cost_added_email_notification",
    "send_document_uploaded_email_notification",
    "send_large_expense_email_notification",
    "send_timeline_event_email_notification",
]
