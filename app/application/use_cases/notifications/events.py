"""Utility helpers to generate and dispatch project notifications."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import (
    Notification,
    NotificationEntityType,
    NotificationType,
    Project,
    User,
)
from app.infrastructure.notifications import dispatch_notifications, run_with_session
from app.infrastructure.repositories import (
    CommentRepository,
    NotificationRepository,
    ProjectRepository,
    UserRepository,
)
from app.utils import utc_now

from . import email_notifications
from .messages import render_notification_message

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@(\w+)")
DEFAULT_USER_NAME = "User"


def _persist_notifications(
    session: Session, notifications: list[Notification]
) -> list[Notification]:
    saved = NotificationRepository(session).create_many(notifications)
    dispatch_notifications(saved)
    return saved


def create_notification(
    session: Session,
    *,
    user_id: int,
    type: NotificationType | str,
    entity_type: NotificationEntityType | str,
    entity_id: str,
    project_id: int | None,
    message: str,
) -> Notification:
    """Store a single unread notification for ``user_id``."""

    notification = Notification(
        id=None,
        user_id=user_id,
        type=NotificationType(type),
        entity_type=NotificationEntityType(entity_type),
        entity_id=str(entity_id),
        project_id=project_id,
        message=message,
        read=False,
    )
    return _persist_notifications(session, [notification])[0]


def _project_recipients(
    session: Session, project: Project, exclude_user_id: int | None
) -> list[int]:
    recipients = [project.owner_id]
    for partner_id in ProjectRepository(session).list_accepted_partner_ids(project.id):
        if partner_id not in recipients:
            recipients.append(partner_id)
    return [user_id for user_id in recipients if user_id != exclude_user_id]


def _schedule_email(
    background_tasks: BackgroundTasks,
    notification: Notification,
    *,
    project: Project,
    entity_id: str,
    message_data: Mapping[str, Any],
    user_name: str,
) -> None:
    """Queue the email matching ``notification.type``, if that type sends one."""

    common = {
        "user_id": notification.user_id,
        "notification_id": notification.id,
        "project_id": project.id,
        "project_name": project.name,
        "user_name": user_name,
    }
    kind = notification.type
    if kind is NotificationType.COST_ADDED and "amount" in message_data:
        background_tasks.add_task(
            run_with_session,
            email_notifications.send_cost_added_email_notification,
            cost_id=entity_id,
            cost_description=message_data.get("description", ""),
            amount=message_data["amount"],
            **common,
        )
    elif kind is NotificationType.LARGE_EXPENSE and "amount" in message_data:
        background_tasks.add_task(
            run_with_session,
            email_notifications.send_large_expense_email_notification,
            cost_id=entity_id,
            cost_description=message_data.get("description", ""),
            amount=message_data["amount"],
            **common,
        )
    elif kind is NotificationType.DOCUMENT_UPLOADED and "file_name" in message_data:
        background_tasks.add_task(
            run_with_session,
            email_notifications.send_document_uploaded_email_notification,
            document_id=entity_id,
            file_name=message_data["file_name"],
            **common,
        )
    elif kind is NotificationType.TIMELINE_EVENT and "event_title" in message_data:
        background_tasks.add_task(
            run_with_session,
            email_notifications.send_timeline_event_email_notification,
            event_id=entity_id,
            event_title=message_data["event_title"],
            event_date=message_data.get("event_date") or utc_now(),
            **common,
        )


def notify_project_members(
    session: Session,
    background_tasks: BackgroundTasks,
    *,
    project_id: int,
    type: NotificationType | str,
    entity_type: NotificationEntityType | str,
    entity_id: str,
    message_data: Mapping[str, Any],
    exclude_user_id: int | None = None,
) -> list[Notification]:
    """Notify the owner and accepted partners of a project.

    One notification row is stored per recipient and the matching email is
    queued on ``background_tasks`` for each of them, so it runs after the
    response. The acting user passed as ``exclude_user_id`` is left out.
    """

    project = ProjectRepository(session).get_active(project_id)
    if project is None:
        logger.warning("Project %s not found for notification", project_id)
        return []

    recipients = _project_recipients(session, project, exclude_user_id)
    if not recipients:
        return []

    kind = NotificationType(type)
    message = render_notification_message(kind, message_data)
    created = _persist_notifications(
        session,
        [
            Notification(
                id=None,
                user_id=user_id,
                type=kind,
                entity_type=NotificationEntityType(entity_type),
                entity_id=str(entity_id),
                project_id=project.id,
                message=message,
            )
            for user_id in recipients
        ],
    )

    users = UserRepository(session).get_map_by_ids(recipients)
    for notification in created:
        user = users.get(notification.user_id)
        _schedule_email(
            background_tasks,
            notification,
            project=project,
            entity_id=str(entity_id),
            message_data=message_data,
            user_name=user.name if user else DEFAULT_USER_NAME,
        )
    return created


def notify_cost_added(
    session: Session,
    background_tasks: BackgroundTasks,
    *,
    project_id: int,
    cost_id: str,
    description: str,
    amount: int,
    project_name: str,
    exclude_user_id: int | None = None,
) -> list[Notification]:
    return notify_project_members(
        session,
        background_tasks,
        project_id=project_id,
        exclude_user_id=exclude_user_id,
        type=NotificationType.COST_ADDED,
        entity_type=NotificationEntityType.COST,
        entity_id=cost_id,
        message_data={
            "description": description,
            "amount": amount,
            "project_name": project_name,
        },
    )


def notify_large_expense(
    session: Session,
    background_tasks: BackgroundTasks,
    *,
    project_id: int,
    cost_id: str,
    description: str,
    amount: int,
    project_name: str,
    exclude_user_id: int | None = None,
) -> list[Notification]:
    return notify_project_members(
        session,
        background_tasks,
        project_id=project_id,
        exclude_user_id=exclude_user_id,
        type=NotificationType.LARGE_EXPENSE,
        entity_type=NotificationEntityType.COST,
        entity_id=cost_id,
        message_data={
            "description": description,
            "amount": amount,
            "project_name": project_name,
        },
    )


def notify_document_uploaded(
    session: Session,
    background_tasks: BackgroundTasks,
    *,
    project_id: int,
    document_id: str,
    file_name: str,
    project_name: str,
    exclude_user_id: int | None = None,
) -> list[Notification]:
    return notify_project_members(
        session,
        background_tasks,
        project_id=project_id,
        exclude_user_id=exclude_user_id,
        type=NotificationType.DOCUMENT_UPLOADED,
        entity_type=NotificationEntityType.DOCUMENT,
        entity_id=document_id,
        message_data={"file_name": file_name, "project_name": project_name},
    )


def notify_timeline_event(
    session: Session,
    background_tasks: BackgroundTasks,
    *,
    project_id: int,
    event_id: str,
    event_title: str,
    project_name: str,
    event_date: datetime | None = None,
    exclude_user_id: int | None = None,
) -> list[Notification]:
    return notify_project_members(
        session,
        background_tasks,
        project_id=project_id,
        exclude_user_id=exclude_user_id,
        type=NotificationType.TIMELINE_EVENT,
        entity_type=NotificationEntityType.EVENT,
        entity_id=event_id,
        message_data={
            "event_title": event_title,
            "event_date": event_date,
            "project_name": project_name,
        },
    )


def notify_partner_invited(
    session: Session,
    *,
    user_id: int,
    project_id: int,
    project_name: str,
    inviter_name: str,
) -> Notification:
    """Tell an invited partner about the invitation. No email is sent."""

    return create_notification(
        session,
        user_id=user_id,
        type=NotificationType.PARTNER_INVITED,
        entity_type=NotificationEntityType.PROJECT,
        entity_id=str(project_id),
        project_id=project_id,
        message=render_notification_message(
            NotificationType.PARTNER_INVITED,
            {"project_name": project_name, "inviter_name": inviter_name},
        ),
    )


def extract_mentions(content: str) -> list[str]:
    """Return the names referenced as ``@First_Last`` in ``content``."""

    return [match.replace("_", " ") for match in MENTION_PATTERN.findall(content or "")]


def _comment_recipients(
    session: Session,
    *,
    entity_type: str,
    entity_id: str,
    content: str,
) -> list[int]:
    recipients: list[int] = list(
        CommentRepository(session).list_commenter_ids(entity_type, entity_id)
    )

    def add(user_ids: Iterable[int]) -> None:
        for user_id in user_ids:
            if user_id is not None and user_id not in recipients:
                recipients.append(user_id)

    try:
        owner_id = CommentRepository(session).get_entity_owner_id(entity_type, entity_id)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Error fetching owner of %s %s for comment notification", entity_type, entity_id
        )
    else:
        add([owner_id])

    mentions = extract_mentions(content)
    if mentions:
        try:
            mentioned = UserRepository(session).list_by_names(mentions)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Error fetching mentioned users")
        else:
            add(user.id for user in mentioned)

    return recipients


def notify_comment_added(
    session: Session,
    *,
    comment_id: str,
    entity_type: NotificationEntityType | str,
    entity_id: str,
    project_id: int,
    project_name: str,
    commenter_name: str,
    comment_author_id: int,
    content: str,
) -> list[Notification]:
    """Notify everyone following a comment thread.

    Followers are previous commenters on the entity, its creator and any user
    mentioned by name. The author never receives their own notification.
    """

    kind = NotificationEntityType(entity_type)
    recipients = [
        user_id
        for user_id in _comment_recipients(
            session, entity_type=kind.value, entity_id=str(entity_id), content=content
        )
        if user_id != comment_author_id
    ]
    if not recipients:
        return []

    message = render_notification_message(
        NotificationType.COMMENT_ADDED,
        {
            "commenter_name": commenter_name,
            "entity_type": kind.value,
            "project_name": project_name,
        },
    )
    created = _persist_notifications(
        session,
        [
            Notification(
                id=None,
                user_id=user_id,
                type=NotificationType.COMMENT_ADDED,
                entity_type=kind,
                entity_id=str(comment_id),
                project_id=project_id,
                message=message,
            )
            for user_id in recipients
        ],
    )
    logger.info(
        "Created %s comment notifications for comment %s", len(created), comment_id
    )
    return created


__all__ = [
    "create_notification",
    "extract_mentions",
    "notify_comment_added",
    "notify_cost_added",
    "notify_document_uploaded",
    "notify_large_expense",
    "notify_partner_invited",
    "notify_project_members",
    "notify_timeline_event",
]
