"""Domain entities for projects and partner access."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Project:
    """Real-estate project owned by a user."""

    id: int
    name: str
    owner_id: int
    deleted_at: datetime | None = None


@dataclass
class ProjectAccess:
    """Partner membership of a project."""

    project_id: int
    user_id: int
    accepted_at: datetime | None = None
    deleted_at: datetime | None = None

    def is_active(self) -> bool:
        """Return ``True`` when the invitation was accepted and not revoked."""

        return self.accepted_at is not None and self.deleted_at is None


__all__ = ["Project", "ProjectAccess"]
