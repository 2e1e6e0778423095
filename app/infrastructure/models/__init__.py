"""ORM models used by the application infrastructure."""

from .activity import CommentModel, CostModel, DocumentModel, EventModel
from .digest_queue import DigestQueueModel
from .email_log import EmailLogModel
from .notification import NotificationModel
from .notification_preference import NotificationPreferenceModel
from .project import ProjectAccessModel, ProjectModel
from .security_event import SecurityEventModel
from .user import UserModel

__all__ = [
    "CommentModel",
    "CostModel",
    "DigestQueueModel",
    "DocumentModel",
    "EmailLogModel",
    "EventModel",
    "NotificationModel",
    "NotificationPreferenceModel",
    "ProjectAccessModel",
    "ProjectModel",
    "SecurityEventModel",
    "UserModel",
]
