"""Read access to the shared user table."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.models import UserModel


class UserRepository:
    """Look up users for notification delivery and authentication."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.id == user_id)
            .filter(UserModel.deleted_at.is_(None))
            .first()
        )
        return self._to_entity(model) if model else None

    def get_map_by_ids(self, user_ids: Iterable[int]) -> dict[int, User]:
        unique_ids = {int(user_id) for user_id in user_ids}
        if not unique_ids:
            return {}

        query = (
            self.session.query(UserModel)
            .filter(UserModel.id.in_(unique_ids))
            .filter(UserModel.deleted_at.is_(None))
        )
        return {model.id: self._to_entity(model) for model in query.all()}

    def list_by_names(self, names: Sequence[str]) -> Sequence[User]:
        """Return users whose display name matches any of ``names`` ignoring case."""

        lowered = {name.strip().lower() for name in names if name and name.strip()}
        if not lowered:
            return []

        query = (
            self.session.query(UserModel)
            .filter(func.lower(UserModel.name).in_(lowered))
            .filter(UserModel.deleted_at.is_(None))
            .order_by(UserModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            is_active=bool(model.is_active),
        )


__all__ = ["UserRepository"]
