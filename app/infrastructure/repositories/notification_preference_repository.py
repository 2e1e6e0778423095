"""Persistence helpers for notification preferences."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import DigestFrequency, NotificationPreference
from app.infrastructure.models import NotificationPreferenceModel
from app.utils import ensure_utc, naive_utc_now

_UPDATABLE_FIELDS = frozenset(
    {
        "email_on_cost",
        "email_on_large_expense",
        "email_on_document",
        "email_on_timeline",
        "email_digest_frequency",
        "timezone",
    }
)


class NotificationPreferenceRepository:
    """Read and upsert the single preference row of a user."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> NotificationPreference | None:
        model = self.session.get(NotificationPreferenceModel, user_id)
        return self._to_entity(model) if model else None

    def create(self, preference: NotificationPreference) -> NotificationPreference:
        model = NotificationPreferenceModel(user_id=preference.user_id)
        self._apply_changes(
            model,
            {name: getattr(preference, name) for name in _UPDATABLE_FIELDS},
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def upsert(
        self, user_id: int, changes: Mapping[str, Any], *, defaults: NotificationPreference
    ) -> NotificationPreference:
        """Apply ``changes`` to the user's row, creating it from ``defaults`` first."""

        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown preference fields: {', '.join(sorted(unknown))}")

        model = self.session.get(NotificationPreferenceModel, user_id)
        if model is None:
            model = NotificationPreferenceModel(user_id=user_id)
            self._apply_changes(
                model, {name: getattr(defaults, name) for name in _UPDATABLE_FIELDS}
            )
            self.session.add(model)
        self._apply_changes(model, changes)
        model.updated_at = naive_utc_now()
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_changes(model: NotificationPreferenceModel, changes: Mapping[str, Any]) -> None:
        for name, value in changes.items():
            if name == "email_digest_frequency":
                value = DigestFrequency(value).value
            setattr(model, name, value)

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> NotificationPreference:
        return NotificationPreference(
            user_id=model.user_id,
            email_on_cost=bool(model.email_on_cost),
            email_on_large_expense=bool(model.email_on_large_expense),
            email_on_document=bool(model.email_on_document),
            email_on_timeline=bool(model.email_on_timeline),
            email_digest_frequency=DigestFrequency(model.email_digest_frequency),
            timezone=model.timezone,
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["NotificationPreferenceRepository"]
