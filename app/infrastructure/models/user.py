"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import expression

from app.infrastructure.database import Base


class UserModel(Base):
    """Columns of the shared user table read by the notification service."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    deleted_at = Column(DateTime, nullable=True)


__all__ = ["UserModel"]
