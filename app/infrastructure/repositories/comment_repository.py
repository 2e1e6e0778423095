"""Queries used to work out who follows a comment thread."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import NotificationEntityType
from app.infrastructure.models import CommentModel, CostModel, DocumentModel, EventModel

_OWNER_COLUMNS = {
    NotificationEntityType.COST: (CostModel, CostModel.created_by_id),
    NotificationEntityType.DOCUMENT: (DocumentModel, DocumentModel.uploaded_by_id),
    NotificationEntityType.EVENT: (EventModel, EventModel.created_by_id),
}


class CommentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_commenter_ids(self, entity_type: str, entity_id: str) -> list[int]:
        """Return the distinct authors of comments on the given entity."""

        query = (
            self.session.query(CommentModel.user_id)
            .filter(CommentModel.entity_type == str(entity_type))
            .filter(CommentModel.entity_id == str(entity_id))
            .distinct()
        )
        return sorted(user_id for (user_id,) in query.all())

    def get_entity_owner_id(self, entity_type: str, entity_id: str) -> int | None:
        """Return the creator of the commented cost, document or event."""

        try:
            model, owner_column = _OWNER_COLUMNS[NotificationEntityType(entity_type)]
        except (KeyError, ValueError):
            return None
        try:
            key = int(entity_id)
        except (TypeError, ValueError):
            return None

        row = self.session.query(owner_column).filter(model.id == key).first()
        return row[0] if row else None


__all__ = ["CommentRepository"]
