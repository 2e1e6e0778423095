"""Persistence helpers for the digest queue."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import DigestQueueEntry, DigestType
from app.infrastructure.models import DigestQueueModel
from app.utils import ensure_naive_utc, ensure_utc


class DigestQueueRepository:
    """Insert and inspect :class:`DigestQueueEntry` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, entry: DigestQueueEntry) -> DigestQueueEntry:
        model = DigestQueueModel(
            user_id=entry.user_id,
            notification_id=entry.notification_id,
            digest_type=DigestType(entry.digest_type).value,
            scheduled_for=ensure_naive_utc(entry.scheduled_for),
            processed=entry.processed,
            processed_at=ensure_naive_utc(entry.processed_at),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_pending_for_user(self, user_id: int) -> Sequence[DigestQueueEntry]:
        query = (
            self.session.query(DigestQueueModel)
            .filter(DigestQueueModel.user_id == user_id)
            .filter(DigestQueueModel.processed.is_(False))
            .order_by(DigestQueueModel.scheduled_for, DigestQueueModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: DigestQueueModel) -> DigestQueueEntry:
        return DigestQueueEntry(
            id=model.id,
            user_id=model.user_id,
            notification_id=model.notification_id,
            digest_type=DigestType(model.digest_type),
            scheduled_for=ensure_utc(model.scheduled_for),
            processed=bool(model.processed),
            processed_at=ensure_utc(model.processed_at),
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["DigestQueueRepository"]
