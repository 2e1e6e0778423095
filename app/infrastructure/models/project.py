"""SQLAlchemy models for projects and partner access."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base


class ProjectModel(Base):
    """Real-estate project; soft-deleted through ``deleted_at``."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    deleted_at = Column(DateTime, nullable=True)

    accesses = relationship("ProjectAccessModel", back_populates="project")


class ProjectAccessModel(Base):
    """Partner invitation; active once accepted and until revoked."""

    __tablename__ = "project_access"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    accepted_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True)

    project = relationship("ProjectModel", back_populates="accesses")


__all__ = ["ProjectAccessModel", "ProjectModel"]
