"""Endpoints to read and change notification email preferences."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import get_preferences, update_preferences
from app.domain.entities import NotificationPreference, User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_active_user
from app.interfaces.api.schemas import (
    NotificationPreferenceRead,
    NotificationPreferenceUpdate,
)

router = APIRouter(prefix="/notification-preferences", tags=["notifications"])


def _to_read_model(preferences: NotificationPreference) -> NotificationPreferenceRead:
    return NotificationPreferenceRead.model_validate(preferences)


@router.get("/", response_model=NotificationPreferenceRead)
def read_preferences(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPreferenceRead:
    """Return the user's preferences, creating the defaults on first access."""

    return _to_read_model(get_preferences(db, user_id=current_user.id))


@router.put("/", response_model=NotificationPreferenceRead)
def change_preferences(
    payload: NotificationPreferenceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPreferenceRead:
    try:
        preferences = update_preferences(
            db,
            user_id=current_user.id,
            changes=payload.model_dump(exclude_unset=True),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_read_model(preferences)
