"""Domain entity for audited security actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class SecurityEventType(str, Enum):
    """Security relevant actions recorded for a user."""

    TWO_FA_ENABLED = "2fa_enabled"
    TWO_FA_DISABLED = "2fa_disabled"
    TWO_FA_LOGIN_SUCCESS = "2fa_login_success"
    TWO_FA_LOGIN_FAILURE = "2fa_login_failure"
    BACKUP_CODE_GENERATED = "backup_code_generated"
    BACKUP_CODE_USED = "backup_code_used"
    BACKUP_DOWNLOADED = "backup_downloaded"


@dataclass
class SecurityEvent:
    """Append-only audit record of a security action."""

    id: int | None
    user_id: int
    event_type: SecurityEventType
    ip_address: str
    user_agent: str
    metadata: dict[str, Any] | None = field(default=None)
    timestamp: datetime | None = None


__all__ = ["SecurityEvent", "SecurityEventType"]
