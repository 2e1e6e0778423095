"""Tests for the security event audit log."""

from __future__ import annotations

import logging

import pytest
from starlette.datastructures import Headers

from app.application.use_cases import (
    SecurityEventLogger,
    get_request_metadata,
    security_event_logger,
)
from app.domain.entities import SecurityEventType
from app.infrastructure.database import SessionLocal

from factories import add_user


@pytest.mark.parametrize(
    ("headers", "expected_ip"),
    [
        (
            {
                "cf-connecting-ip": "1.1.1.1",
                "x-forwarded-for": "2.2.2.2",
                "x-real-ip": "3.3.3.3",
            },
            "1.1.1.1",
        ),
        ({"X-Forwarded-For": " 2.2.2.2 , 10.0.0.1", "x-real-ip": "3.3.3.3"}, "2.2.2.2"),
        ({"X-Real-IP": "3.3.3.3"}, "3.3.3.3"),
        ({}, "unknown"),
    ],
)
def test_request_metadata_ip_precedence(headers, expected_ip) -> None:
    assert get_request_metadata(headers).ip_address == expected_ip


def test_request_metadata_user_agent() -> None:
    assert get_request_metadata({"User-Agent": "Firefox"}).user_agent == "Firefox"
    assert get_request_metadata({"user-agent": ""}).user_agent == "unknown"


def test_request_metadata_accepts_starlette_headers() -> None:
    headers = Headers({"x-real-ip": "9.9.9.9", "user-agent": "curl/8"})
    metadata = get_request_metadata(headers)
    assert metadata.ip_address == "9.9.9.9"
    assert metadata.user_agent == "curl/8"


def test_wrappers_store_events_newest_first(session) -> None:
    user = add_user(session, "Jane Doe")
    logger = SecurityEventLogger(session_factory=SessionLocal)

    logger.log_2fa_enabled(user.id, "1.1.1.1", "ua")
    logger.log_2fa_login_failure(user.id, "1.1.1.1", "ua", attempts=3)
    logger.log_backup_code_generated(user.id, "1.1.1.1", "ua", code_count=10)
    logger.log_backup_downloaded(user.id, 42, "Harbour View", "1.1.1.1", "ua")

    events = logger.get_user_events(user.id)
    assert [event.event_type for event in events] == [
        SecurityEventType.BACKUP_DOWNLOADED,
        SecurityEventType.BACKUP_CODE_GENERATED,
        SecurityEventType.TWO_FA_LOGIN_FAILURE,
        SecurityEventType.TWO_FA_ENABLED,
    ]
    assert events[0].metadata == {"project_id": 42, "project_name": "Harbour View"}
    assert events[1].metadata == {"code_count": 10}
    assert events[2].metadata == {"attempts": 3}
    assert events[3].metadata is None
    assert events[3].ip_address == "1.1.1.1"
    assert events[3].timestamp is not None


def test_remaining_wrappers_use_their_event_types(session) -> None:
    user = add_user(session, "Jane Doe")

    security_event_logger.log_2fa_disabled(user.id, "ip", "ua")
    security_event_logger.log_2fa_login_success(user.id, "ip", "ua")
    security_event_logger.log_backup_code_used(user.id, "ip", "ua")

    types = {event.event_type for event in security_event_logger.get_user_events(user.id)}
    assert types == {
        SecurityEventType.TWO_FA_DISABLED,
        SecurityEventType.TWO_FA_LOGIN_SUCCESS,
        SecurityEventType.BACKUP_CODE_USED,
    }


def test_get_user_events_honours_limit(session) -> None:
    user = add_user(session, "Jane Doe")
    for _ in range(5):
        security_event_logger.log_2fa_login_success(user.id, "ip", "ua")

    assert len(security_event_logger.get_user_events(user.id, limit=3)) == 3


def test_storage_failures_are_swallowed(caplog) -> None:
    class BrokenSession:
        rolled_back = False
        closed = False

        def add(self, _model):
            raise RuntimeError("database is gone")

        def rollback(self):
            BrokenSession.rolled_back = True

        def close(self):
            BrokenSession.closed = True

    logger = SecurityEventLogger(session_factory=BrokenSession)

    with caplog.at_level(logging.ERROR):
        logger.log_2fa_enabled(1, "ip", "ua")

    assert BrokenSession.rolled_back
    assert BrokenSession.closed
    assert "Failed to log security event" in caplog.text


def test_unknown_event_type_is_not_stored(session, caplog) -> None:
    user = add_user(session, "Jane Doe")

    with caplog.at_level(logging.ERROR):
        security_event_logger.log_event(user.id, "password_changed", "ip", "ua")

    assert security_event_logger.get_user_events(user.id) == []
