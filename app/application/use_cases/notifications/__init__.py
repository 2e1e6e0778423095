"""Public helpers for emitting and managing project notifications."""

from .digest import calculate_next_digest_time
from .email_notifications import (
    send_cost_added_email_notification,
    send_document_uploaded_email_notification,
    send_large_expense_email_notification,
    send_timeline_event_email_notification,
)
from .events import (
    create_notification,
    extract_mentions,
    notify_comment_added,
    notify_cost_added,
    notify_document_uploaded,
    notify_large_expense,
    notify_partner_invited,
    notify_project_members,
    notify_timeline_event,
)
from .inbox import (
    count_unread_notifications,
    list_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
)
from .messages import format_usd, render_notification_message
from .preferences import get_preferences, unsubscribe_from_emails, update_preferences

__all__ = [
    "calculate_next_digest_time",
    "count_unread_notifications",
    "create_notification",
    "extract_mentions",
    "format_usd",
    "get_preferences",
    "list_notifications",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
    "notify_comment_added",
    "notify_cost_added",
    "notify_document_uploaded",
    "notify_large_expense",
    "notify_partner_invited",
    "notify_project_members",
    "notify_timeline_event",
    "render_notification_message",
    "send_cost_added_email_notification",
    "send_document_uploaded_email_notification",
    "send_large_expense_email_notification",
    "send_timeline_event_email_notification",
    "unsubscribe_from_emails",
    "update_preferences",
]
