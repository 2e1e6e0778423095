"""Audit trail for two-factor authentication and backup actions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import SecurityEvent, SecurityEventType
from app.infrastructure.repositories import SecurityEventRepository
from app.utils import utc_now

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


@dataclass(frozen=True)
class RequestMetadata:
    ip_address: str
    user_agent: str


def get_request_metadata(headers: Mapping[str, str]) -> RequestMetadata:
    """Extract the client address and user agent from request headers.

    The address is taken from ``cf-connecting-ip``, then the first entry of
    ``x-forwarded-for``, then ``x-real-ip``. Missing values become
    ``"unknown"``.
    """

    lowered = {str(name).lower(): value for name, value in headers.items()}

    forwarded = (lowered.get("x-forwarded-for") or "").split(",")[0].strip()
    ip_address = (
        lowered.get("cf-connecting-ip")
        or forwarded
        or lowered.get("x-real-ip")
        or UNKNOWN
    )
    user_agent = lowered.get("user-agent") or UNKNOWN
    return RequestMetadata(ip_address=ip_address, user_agent=user_agent)


def _default_session_factory() -> Session:
    from app.infrastructure.database import SessionLocal

    return SessionLocal()


class SecurityEventLogger:
    """Record security events without ever failing the calling flow."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory or _default_session_factory

    def log_event(
        self,
        user_id: int,
        event_type: SecurityEventType | str,
        ip_address: str,
        user_agent: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        session = self._session_factory()
        try:
            SecurityEventRepository(session).create(
                SecurityEvent(
                    id=None,
                    user_id=user_id,
                    event_type=SecurityEventType(event_type),
                    ip_address=ip_address,
                    user_agent=user_agent,
                    metadata=dict(metadata) if metadata else None,
                    timestamp=utc_now(),
                )
            )
        except Exception:
            session.rollback()
            logger.exception(
                "Failed to log security event %s for user %s", event_type, user_id
            )
        finally:
            session.close()

    def log_2fa_enabled(self, user_id: int, ip_address: str, user_agent: str) -> None:
        self.log_event(user_id, SecurityEventType.TWO_FA_ENABLED, ip_address, user_agent)

    def log_2fa_disabled(self, user_id: int, ip_address: str, user_agent: str) -> None:
        self.log_event(user_id, SecurityEventType.TWO_FA_DISABLED, ip_address, user_agent)

    def log_2fa_login_success(self, user_id: int, ip_address: str, user_agent: str) -> None:
        self.log_event(
            user_id, SecurityEventType.TWO_FA_LOGIN_SUCCESS, ip_address, user_agent
        )

    def log_2fa_login_failure(
        self, user_id: int, ip_address: str, user_agent: str, attempts: int
    ) -> None:
        self.log_event(
            user_id,
            SecurityEventType.TWO_FA_LOGIN_FAILURE,
            ip_address,
            user_agent,
            {"attempts": attempts},
        )

    def log_backup_code_generated(
        self, user_id: int, ip_address: str, user_agent: str, code_count: int
    ) -> None:
        self.log_event(
            user_id,
            SecurityEventType.BACKUP_CODE_GENERATED,
            ip_address,
            user_agent,
            {"code_count": code_count},
        )

    def log_backup_code_used(self, user_id: int, ip_address: str, user_agent: str) -> None:
        self.log_event(user_id, SecurityEventType.BACKUP_CODE_USED, ip_address, user_agent)

    def log_backup_downloaded(
        self,
        user_id: int,
        project_id: int,
        project_name: str,
        ip_address: str,
        user_agent: str,
    ) -> None:
        self.log_event(
            user_id,
            SecurityEventType.BACKUP_DOWNLOADED,
            ip_address,
            user_agent,
            {"project_id": project_id, "project_name": project_name},
        )

    def get_user_events(self, user_id: int, limit: int = 50) -> Sequence[SecurityEvent]:
        """Return the user's most recent events, newest first."""

        session = self._session_factory()
        try:
            return SecurityEventRepository(session).list_for_user(user_id, limit=limit)
        finally:
            session.close()


security_event_logger = SecurityEventLogger()


__all__ = [
    "RequestMetadata",
    "SecurityEventLogger",
    "get_request_metadata",
    "security_event_logger",
]
