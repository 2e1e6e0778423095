"""Read access to projects and their partner memberships."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import Project
from app.infrastructure.models import ProjectAccessModel, ProjectModel
from app.utils import ensure_utc


class ProjectRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_active(self, project_id: int) -> Project | None:
        """Return the project unless it is missing or soft-deleted."""

        model = (
            self.session.query(ProjectModel)
            .filter(ProjectModel.id == project_id)
            .filter(ProjectModel.deleted_at.is_(None))
            .first()
        )
        if model is None:
            return None
        return Project(
            id=model.id,
            name=model.name,
            owner_id=model.owner_id,
            deleted_at=ensure_utc(model.deleted_at),
        )

    def list_accepted_partner_ids(self, project_id: int) -> list[int]:
        """Return partners who accepted their invitation and were not removed."""

        query = (
            self.session.query(ProjectAccessModel.user_id)
            .filter(ProjectAccessModel.project_id == project_id)
            .filter(ProjectAccessModel.accepted_at.is_not(None))
            .filter(ProjectAccessModel.deleted_at.is_(None))
            .order_by(ProjectAccessModel.id)
        )
        return [user_id for (user_id,) in query.all()]


__all__ = ["ProjectRepository"]
