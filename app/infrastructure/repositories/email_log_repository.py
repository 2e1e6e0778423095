"""Persistence layer for email delivery logs."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import EmailLog, EmailStatus
from app.infrastructure.models import EmailLogModel
from app.utils import ensure_naive_utc, ensure_utc


class EmailLogRepository:
    """Append-only access to :class:`EmailLog` entries."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, entry: EmailLog) -> EmailLog:
        model = EmailLogModel(
            user_id=entry.user_id,
            notification_id=entry.notification_id,
            email_type=entry.email_type,
            recipient_email=entry.recipient_email,
            subject=entry.subject,
            status=EmailStatus(entry.status).value,
            provider_message_id=entry.provider_message_id,
            attempts=entry.attempts,
            last_error=entry.last_error,
        )
        if entry.sent_at is not None:
            model.sent_at = ensure_naive_utc(entry.sent_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(self, user_id: int) -> Sequence[EmailLog]:
        query = (
            self.session.query(EmailLogModel)
            .filter(EmailLogModel.user_id == user_id)
            .order_by(EmailLogModel.sent_at.desc(), EmailLogModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: EmailLogModel) -> EmailLog:
        return EmailLog(
            id=model.id,
            user_id=model.user_id,
            notification_id=model.notification_id,
            email_type=model.email_type,
            recipient_email=model.recipient_email,
            subject=model.subject,
            status=EmailStatus(model.status),
            provider_message_id=model.provider_message_id,
            attempts=model.attempts,
            last_error=model.last_error,
            sent_at=ensure_utc(model.sent_at),
        )


__all__ = ["EmailLogRepository"]
