"""Tests for inbox and preference use cases."""

from __future__ import annotations

from datetime import datetime

import pytest

from app.application.use_cases.notifications import (
    count_unread_notifications,
    create_notification,
    get_preferences,
    list_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
    unsubscribe_from_emails,
    update_preferences,
)
from app.domain.entities import DigestFrequency, ProjectAccess
from app.infrastructure.repositories import NotificationPreferenceRepository

from factories import add_user


def _notify(session, user_id: int, message: str = "Hi"):
    return create_notification(
        session,
        user_id=user_id,
        type="document_uploaded",
        entity_type="document",
        entity_id="4",
        project_id=None,
        message=message,
    )


def test_list_validates_paging(session) -> None:
    user = add_user(session, "Jane Doe")
    with pytest.raises(ValueError):
        list_notifications(session, user_id=user.id, limit=0)
    with pytest.raises(ValueError):
        list_notifications(session, user_id=user.id, limit=101)
    with pytest.raises(ValueError):
        list_notifications(session, user_id=user.id, offset=-1)


def test_mark_read_checks_ownership(session) -> None:
    jane = add_user(session, "Jane Doe")
    john = add_user(session, "John Roe")
    notification = _notify(session, jane.id)

    with pytest.raises(PermissionError):
        mark_notification_as_read(session, notification_id=notification.id, user_id=john.id)
    with pytest.raises(ValueError):
        mark_notification_as_read(session, notification_id=12345, user_id=jane.id)

    updated = mark_notification_as_read(
        session, notification_id=notification.id, user_id=jane.id
    )
    assert updated.read is True
    assert count_unread_notifications(session, user_id=jane.id) == 0


def test_mark_all_only_touches_own_unread(session) -> None:
    jane = add_user(session, "Jane Doe")
    john = add_user(session, "John Roe")
    for _ in range(3):
        _notify(session, jane.id)
    _notify(session, john.id)

    assert mark_all_notifications_as_read(session, user_id=jane.id) == 3
    assert mark_all_notifications_as_read(session, user_id=jane.id) == 0
    assert count_unread_notifications(session, user_id=john.id) == 1


def test_get_preferences_creates_defaults_once(session) -> None:
    user = add_user(session, "Jane Doe")
    assert NotificationPreferenceRepository(session).get(user.id) is None

    preferences = get_preferences(session, user_id=user.id)

    assert preferences.email_digest_frequency is DigestFrequency.IMMEDIATE
    assert preferences.timezone == "Australia/Sydney"
    assert all(
        (
            preferences.email_on_cost,
            preferences.email_on_large_expense,
            preferences.email_on_document,
            preferences.email_on_timeline,
        )
    )
    assert NotificationPreferenceRepository(session).get(user.id) is not None
    assert get_preferences(session, user_id=user.id).updated_at == preferences.updated_at


def test_update_preferences_is_partial(session) -> None:
    user = add_user(session, "Jane Doe")

    updated = update_preferences(
        session,
        user_id=user.id,
        changes={"email_on_timeline": False, "email_digest_frequency": "daily", "timezone": None},
    )

    assert updated.email_on_timeline is False
    assert updated.email_on_cost is True
    assert updated.email_digest_frequency is DigestFrequency.DAILY
    assert updated.timezone == "Australia/Sydney"


@pytest.mark.parametrize(
    "changes",
    [
        {},
        {"timezone": None},
        {"timezone": "Nowhere/Special"},
        {"timezone": "UTC+24"},
        {"email_digest_frequency": "fortnightly"},
        {"favourite_colour": "blue"},
    ],
)
def test_update_preferences_rejects_bad_input(session, changes) -> None:
    user = add_user(session, "Jane Doe")
    with pytest.raises(ValueError):
        update_preferences(session, user_id=user.id, changes=changes)


def test_unsubscribe_keeps_other_switches(session) -> None:
    user = add_user(session, "Jane Doe")
    update_preferences(session, user_id=user.id, changes={"email_on_cost": False})

    preferences = unsubscribe_from_emails(session, user_id=user.id)

    assert preferences.email_digest_frequency is DigestFrequency.NEVER
    assert preferences.email_on_cost is False
    assert preferences.email_on_large_expense is True


def test_project_access_is_active_only_when_accepted_and_not_removed() -> None:
    accepted = datetime(2024, 1, 1)
    assert ProjectAccess(project_id=1, user_id=2, accepted_at=accepted).is_active()
    assert not ProjectAccess(project_id=1, user_id=2).is_active()
    assert not ProjectAccess(
        project_id=1, user_id=2, accepted_at=accepted, deleted_at=datetime(2024, 2, 1)
    ).is_active()
