"""Schemas for the security activity log."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from app.domain.entities import SecurityEventType


class SecurityEventRead(BaseModel):
    id: int
    event_type: SecurityEventType
    ip_address: str
    user_agent: str
    metadata: dict[str, Any] | None = None
    timestamp: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = ["SecurityEventRead"]
