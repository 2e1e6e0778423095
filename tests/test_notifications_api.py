"""Integration tests for the notification, preference and security endpoints."""

from __future__ import annotations

import types

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.application.use_cases import security_event_logger
from app.application.use_cases.notifications import create_notification
from app.domain.entities import DigestFrequency
from app.infrastructure.repositories import NotificationPreferenceRepository
from app.infrastructure.security import create_access_token, generate_unsubscribe_token

from factories import add_project, add_user


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch):
    """Return a test client bound to a clean application instance."""

    from app import main as main_module

    # The in-memory database lives on the engine's only connection.
    monkeypatch.setattr(main_module, "engine", types.SimpleNamespace(dispose=lambda: None))

    app = main_module.create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def jane(session):
    return add_user(session, "Jane Doe")


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


def _notify(session, user, project_id=None, message="Hello"):
    return create_notification(
        session,
        user_id=user.id,
        type="cost_added",
        entity_type="cost",
        entity_id="1",
        project_id=project_id,
        message=message,
    )


def test_requires_authentication(client: TestClient) -> None:
    assert client.get("/notifications/").status_code == 401
    response = client.get("/notifications/", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401


def test_token_for_unknown_user_is_rejected(client: TestClient) -> None:
    headers = {"Authorization": f"Bearer {create_access_token({'sub': '999'})}"}
    assert client.get("/notifications/unread-count", headers=headers).status_code == 401


def test_inactive_user_is_rejected(client: TestClient, session) -> None:
    user = add_user(session, "Idle User", is_active=False)
    assert client.get("/notifications/", headers=_auth(user)).status_code == 400


def test_list_and_count_notifications(client: TestClient, session, jane) -> None:
    project = add_project(session, jane)
    first = _notify(session, jane, message="first")
    _notify(session, jane, project_id=project.id, message="second")
    other = add_user(session, "Other Person")
    _notify(session, other, message="not yours")

    response = client.get("/notifications/", headers=_auth(jane))
    assert response.status_code == 200
    body = response.json()
    assert [item["message"] for item in body] == ["second", "first"]
    assert body[0]["type"] == "cost_added"
    assert body[0]["entity_type"] == "cost"
    assert body[0]["read"] is False

    response = client.get(
        "/notifications/", params={"project_id": project.id}, headers=_auth(jane)
    )
    assert [item["message"] for item in response.json()] == ["second"]

    response = client.get("/notifications/", params={"limit": 1, "offset": 1}, headers=_auth(jane))
    assert [item["id"] for item in response.json()] == [first.id]

    assert client.get("/notifications/", params={"limit": 0}, headers=_auth(jane)).status_code == 422

    response = client.get("/notifications/unread-count", headers=_auth(jane))
    assert response.json() == {"count": 2}


def test_mark_one_as_read(client: TestClient, session, jane) -> None:
    notification = _notify(session, jane)
    other = add_user(session, "Other Person")

    forbidden = client.post(f"/notifications/{notification.id}/read", headers=_auth(other))
    assert forbidden.status_code == 403

    missing = client.post("/notifications/9999/read", headers=_auth(jane))
    assert missing.status_code == 404

    response = client.post(f"/notifications/{notification.id}/read", headers=_auth(jane))
    assert response.status_code == 200
    assert response.json()["read"] is True

    unread = client.get(
        "/notifications/", params={"unread_only": True}, headers=_auth(jane)
    )
    assert unread.json() == []


def test_mark_all_as_read(client: TestClient, session, jane) -> None:
    project = add_project(session, jane)
    _notify(session, jane)
    _notify(session, jane, project_id=project.id)
    _notify(session, jane, project_id=project.id)

    response = client.post(
        "/notifications/read-all", json={"project_id": project.id}, headers=_auth(jane)
    )
    assert response.json() == {"updated": 2}

    response = client.post("/notifications/read-all", headers=_auth(jane))
    assert response.json() == {"updated": 1}
    assert client.get("/notifications/unread-count", headers=_auth(jane)).json() == {"count": 0}


def test_preferences_default_and_update(client: TestClient, jane) -> None:
    response = client.get("/notification-preferences/", headers=_auth(jane))
    assert response.status_code == 200
    body = response.json()
    assert body["email_on_cost"] is True
    assert body["email_digest_frequency"] == "immediate"
    assert body["timezone"] == "Australia/Sydney"

    response = client.put(
        "/notification-preferences/",
        json={"email_on_document": False, "email_digest_frequency": "weekly", "timezone": "Europe/Paris"},
        headers=_auth(jane),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["email_on_document"] is False
    assert body["email_on_cost"] is True
    assert body["email_digest_frequency"] == "weekly"
    assert body["timezone"] == "Europe/Paris"
    assert body["updated_at"] is not None


@pytest.mark.parametrize(
    ("payload", "status_code"),
    [
        ({}, 400),
        ({"timezone": "Moon/Base"}, 400),
        ({"email_digest_frequency": "hourly"}, 422),
        ({"unknown": True}, 422),
    ],
)
def test_invalid_preference_updates(client: TestClient, jane, payload, status_code) -> None:
    response = client.put("/notification-preferences/", json=payload, headers=_auth(jane))
    assert response.status_code == status_code


def test_unsubscribe_link_turns_emails_off(client: TestClient, session, jane) -> None:
    response = client.post(f"/unsubscribe/{generate_unsubscribe_token(jane.id)}")
    assert response.status_code == 200
    assert response.json()["success"] is True

    session.expire_all()
    preferences = NotificationPreferenceRepository(session).get(jane.id)
    assert preferences.email_digest_frequency is DigestFrequency.NEVER
    assert preferences.email_on_cost is True


def test_unsubscribe_rejects_bad_tokens(client: TestClient) -> None:
    assert client.post("/unsubscribe/not-a-token").status_code == 400
    assert client.post(f"/unsubscribe/{generate_unsubscribe_token(12345)}").status_code == 404


def test_security_activity(client: TestClient, session, jane) -> None:
    security_event_logger.log_2fa_enabled(jane.id, "1.2.3.4", "pytest")
    security_event_logger.log_backup_code_generated(jane.id, "1.2.3.4", "pytest", code_count=8)

    response = client.get("/security/activity", headers=_auth(jane))
    assert response.status_code == 200
    body = response.json()
    assert [event["event_type"] for event in body] == ["backup_code_generated", "2fa_enabled"]
    assert body[0]["metadata"] == {"code_count": 8}
    assert body[1]["ip_address"] == "1.2.3.4"


def test_websocket_streams_pending_notifications(client: TestClient, session, jane) -> None:
    first = _notify(session, jane, message="pending")

    with client.websocket_connect(f"/notifications/ws?token={create_access_token({'sub': str(jane.id)})}") as ws:
        init = ws.receive_json()
        assert init["type"] == "init"
        assert [item["id"] for item in init["data"]] == [first.id]

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

        ws.send_json({"type": "ack", "ids": [first.id]})
        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

    assert client.get("/notifications/unread-count", headers=_auth(jane)).json() == {"count": 0}


def test_websocket_without_token_is_refused(client: TestClient) -> None:
    from starlette.websockets import WebSocketDisconnect

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/notifications/ws") as ws:
            ws.receive_json()
