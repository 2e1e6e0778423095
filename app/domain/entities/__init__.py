"""Domain entities exposed by the application."""

from .digest_queue_entry import DigestQueueEntry, DigestType
from .email_log import EmailLog, EmailStatus
from .notification import Notification, NotificationEntityType, NotificationType
from .notification_preference import DigestFrequency, NotificationPreference
from .project import Project, ProjectAccess
from .security_event import SecurityEvent, SecurityEventType
from .user import User

__all__ = [
    "DigestFrequency",
    "DigestQueueEntry",
    "DigestType",
    "EmailLog",
    "EmailStatus",
    "Notification",
    "NotificationEntityType",
    "NotificationPreference",
    "NotificationType",
    "Project",
    "ProjectAccess",
    "SecurityEvent",
    "SecurityEventType",
    "User",
]
