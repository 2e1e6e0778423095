"""One-click unsubscribe links embedded in notification emails."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import unsubscribe_from_emails
from app.infrastructure.database import get_db
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import verify_unsubscribe_token
from app.interfaces.api.schemas import UnsubscribeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/unsubscribe", tags=["notifications"])


@router.post("/{token}", response_model=UnsubscribeResponse)
def unsubscribe(token: str, db: Session = Depends(get_db)) -> UnsubscribeResponse:
    """Turn off notification emails for the user named in ``token``."""

    try:
        user_id = verify_unsubscribe_token(token)
    except ValueError as exc:
        logger.warning("Rejected unsubscribe token: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if UserRepository(db).get(user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    unsubscribe_from_emails(db, user_id=user_id)
    return UnsubscribeResponse(
        message="You have been unsubscribed from notification emails."
    )
