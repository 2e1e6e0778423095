from fastapi import FastAPI

from .notification_preferences import router as notification_preferences_router
from .notifications import router as notifications_router
from .security import router as security_router
from .unsubscribe import router as unsubscribe_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notifications_router)
    app.include_router(notification_preferences_router)
    app.include_router(security_router)
    app.include_router(unsubscribe_router)
