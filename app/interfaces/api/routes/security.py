"""Security activity log of the authenticated user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.application.use_cases import security_event_logger
from app.domain.entities import User
from app.interfaces.api.dependencies import get_current_active_user
from app.interfaces.api.schemas import SecurityEventRead

router = APIRouter(prefix="/security", tags=["security"])


@router.get("/activity", response_model=list[SecurityEventRead])
def read_security_activity(
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
) -> list[SecurityEventRead]:
    """Return the user's latest security events, newest first."""

    events = security_event_logger.get_user_events(current_user.id, limit=limit)
    return [SecurityEventRead.model_validate(event) for event in events]
