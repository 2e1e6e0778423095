"""Session handling for notification jobs run through FastAPI ``BackgroundTasks``.

Callers queue :func:`run_with_session` with ``background_tasks.add_task`` so the
job runs after the response is sent, with its own database session. Failures
are logged and never reach the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

SessionJob = Callable[..., Any]


def _default_session_factory() -> Session:
    from app.infrastructure.database import SessionLocal

    return SessionLocal()


def run_with_session(
    func: SessionJob,
    /,
    session_factory: Callable[[], Session] | None = None,
    **kwargs: Any,
) -> None:
    """Call ``func(session, **kwargs)`` with a fresh session and swallow errors."""

    session = (session_factory or _default_session_factory)()
    try:
        func(session, **kwargs)
    except Exception as exc:
        session.rollback()
        logger.exception(
            "Background notification job %s failed: %s",
            getattr(func, "__name__", repr(func)),
            exc,
        )
    finally:
        session.close()


__all__ = ["run_with_session"]
