"""Use cases for reading and changing notification preferences."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import DigestFrequency, NotificationPreference
from app.infrastructure.repositories import NotificationPreferenceRepository
from app.utils import is_valid_timezone

logger = logging.getLogger(__name__)


def _defaults(user_id: int) -> NotificationPreference:
    return NotificationPreference.defaults(
        user_id, timezone=get_settings().default_user_timezone
    )


def get_preferences(session: Session, *, user_id: int) -> NotificationPreference:
    """Return the user's preferences, storing the defaults on first access."""

    repository = NotificationPreferenceRepository(session)
    preferences = repository.get(user_id)
    if preferences is None:
        preferences = repository.create(_defaults(user_id))
    return preferences


def update_preferences(
    session: Session, *, user_id: int, changes: Mapping[str, Any]
) -> NotificationPreference:
    """Apply a partial update to the user's preferences."""

    updates = {name: value for name, value in changes.items() if value is not None}
    if not updates:
        raise ValueError("No preference changes provided")

    timezone_name = updates.get("timezone")
    if timezone_name is not None and not is_valid_timezone(timezone_name):
        raise ValueError(f"Unknown timezone: {timezone_name}")

    if "email_digest_frequency" in updates:
        try:
            updates["email_digest_frequency"] = DigestFrequency(
                updates["email_digest_frequency"]
            )
        except ValueError as exc:
            raise ValueError(
                f"Invalid digest frequency: {updates['email_digest_frequency']}"
            ) from exc

    preferences = NotificationPreferenceRepository(session).upsert(
        user_id, updates, defaults=_defaults(user_id)
    )
    logger.info("Updated notification preferences for user %s", user_id)
    return preferences


def unsubscribe_from_emails(session: Session, *, user_id: int) -> NotificationPreference:
    """Stop every non-urgent notification email for ``user_id``."""

    preferences = NotificationPreferenceRepository(session).upsert(
        user_id,
        {"email_digest_frequency": DigestFrequency.NEVER},
        defaults=_defaults(user_id),
    )
    logger.info("User %s unsubscribed from notification emails", user_id)
    return preferences


__all__ = ["get_preferences", "unsubscribe_from_emails", "update_preferences"]
