from .notification import (
    MarkAllReadRequest,
    MarkAllReadResponse,
    NotificationRead,
    UnreadCountRead,
)
from .notification_preference import (
    NotificationPreferenceRead,
    NotificationPreferenceUpdate,
    UnsubscribeResponse,
)
from .security_event import SecurityEventRead

__all__ = [
    "MarkAllReadRequest",
    "MarkAllReadResponse",
    "NotificationPreferenceRead",
    "NotificationPreferenceUpdate",
    "NotificationRead",
    "SecurityEventRead",
    "UnreadCountRead",
    "UnsubscribeResponse",
]
