"""Helpers that insert the rows notification fan-out reads."""

from __future__ import annotations

from datetime import datetime

from app.infrastructure.models import (
    CommentModel,
    CostModel,
    ProjectAccessModel,
    ProjectModel,
    UserModel,
)


def add_user(session, name: str, email: str | None = None, **extra) -> UserModel:
    user = UserModel(name=name, email=email or f"{name.lower().replace(' ', '.')}@example.com", **extra)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def add_project(
    session,
    owner: UserModel,
    name: str = "Harbour View",
    *,
    partners: tuple[UserModel, ...] = (),
    pending: tuple[UserModel, ...] = (),
    removed: tuple[UserModel, ...] = (),
    deleted: bool = False,
) -> ProjectModel:
    project = ProjectModel(
        name=name,
        owner_id=owner.id,
        deleted_at=datetime(2024, 1, 1) if deleted else None,
    )
    session.add(project)
    session.commit()
    for partner in partners:
        session.add(
            ProjectAccessModel(
                project_id=project.id, user_id=partner.id, accepted_at=datetime(2024, 1, 2)
            )
        )
    for partner in pending:
        session.add(ProjectAccessModel(project_id=project.id, user_id=partner.id))
    for partner in removed:
        session.add(
            ProjectAccessModel(
                project_id=project.id,
                user_id=partner.id,
                accepted_at=datetime(2024, 1, 2),
                deleted_at=datetime(2024, 2, 1),
            )
        )
    session.commit()
    session.refresh(project)
    return project


def add_cost(session, project: ProjectModel, created_by: UserModel | None) -> CostModel:
    cost = CostModel(project_id=project.id, created_by_id=created_by.id if created_by else None)
    session.add(cost)
    session.commit()
    session.refresh(cost)
    return cost


def add_comment(session, entity_type: str, entity_id, author: UserModel) -> CommentModel:
    comment = CommentModel(entity_type=entity_type, entity_id=str(entity_id), user_id=author.id)
    session.add(comment)
    session.commit()
    session.refresh(comment)
    return comment


def queued_job_names(background_tasks) -> list[str]:
    """Names of the notification jobs queued through ``run_with_session``."""

    return [task.args[0].__name__ for task in background_tasks.tasks]


def run_background_tasks(background_tasks) -> None:
    """Run queued tasks the way the response would after it is sent."""

    for task in background_tasks.tasks:
        task.func(*task.args, **task.kwargs)
