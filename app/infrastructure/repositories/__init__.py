"""Repository implementations for infrastructure layer."""

from .comment_repository import CommentRepository
from .digest_queue_repository import DigestQueueRepository
from .email_log_repository import EmailLogRepository
from .notification_preference_repository import NotificationPreferenceRepository
from .notification_repository import NotificationRepository
from .project_repository import ProjectRepository
from .security_event_repository import SecurityEventRepository
from .user_repository import UserRepository

__all__ = [
    "CommentRepository",
    "DigestQueueRepository",
    "EmailLogRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "ProjectRepository",
    "SecurityEventRepository",
    "UserRepository",
]
