"""Persistence layer for security audit events.

The table is insert-only, so no update or delete helpers exist here.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import SecurityEvent, SecurityEventType
from app.infrastructure.models import SecurityEventModel
from app.utils import ensure_naive_utc, ensure_utc, naive_utc_now


class SecurityEventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, event: SecurityEvent) -> SecurityEvent:
        model = SecurityEventModel(
            user_id=event.user_id,
            event_type=SecurityEventType(event.event_type).value,
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            event_metadata=dict(event.metadata) if event.metadata else None,
            timestamp=ensure_naive_utc(event.timestamp) or naive_utc_now(),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_user(self, user_id: int, *, limit: int = 50) -> Sequence[SecurityEvent]:
        query = (
            self.session.query(SecurityEventModel)
            .filter(SecurityEventModel.user_id == user_id)
            .order_by(SecurityEventModel.timestamp.desc(), SecurityEventModel.id.desc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: SecurityEventModel) -> SecurityEvent:
        return SecurityEvent(
            id=model.id,
            user_id=model.user_id,
            event_type=SecurityEventType(model.event_type),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            metadata=model.event_metadata,
            timestamp=ensure_utc(model.timestamp),
        )


__all__ = ["SecurityEventRepository"]
