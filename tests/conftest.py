"""Shared fixtures: an in-memory database and request background tasks."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from fastapi import BackgroundTasks

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEFAULT_USER_TIMEZONE"] = "Australia/Sydney"
for name in ("SENDGRID_API_KEY", "SENDGRID_SENDER", "REDIS_URL"):
    os.environ.pop(name, None)

from app.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from app.infrastructure import database  # noqa: E402
from app.infrastructure import models  # noqa: E402,F401
from app.infrastructure.notifications import rate_limiter  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    rate_limiter.email_rate_limiter.clear_all()
    yield
    rate_limiter.email_rate_limiter.clear_all()


@pytest.fixture()
def background_tasks() -> BackgroundTasks:
    return BackgroundTasks()


@pytest.fixture()
def session():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def sent_emails(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, object]]:
    """Replace the SendGrid senders with recorders returning a message id."""

    from app.infrastructure import email as email_module

    sent: list[tuple[str, object]] = []

    def recorder(kind: str):
        def _send(data):
            sent.append((kind, data))
            return f"msg-{len(sent)}"

        return _send

    for kind in ("cost_added", "large_expense", "document_uploaded", "timeline_event"):
        monkeypatch.setattr(email_module, f"send_{kind}_email", recorder(kind))
    return sent


