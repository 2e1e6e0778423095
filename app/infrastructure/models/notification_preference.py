"""SQLAlchemy model for per-user email preferences."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import naive_utc_now


class NotificationPreferenceModel(Base):
    """One row per user; absence means every default applies."""

    __tablename__ = "notification_preferences"

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    email_on_cost = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    email_on_large_expense = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    email_on_document = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    email_on_timeline = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    email_digest_frequency = Column(String(20), nullable=False, default="immediate")
    timezone = Column(String(64), nullable=False, default="Australia/Sydney")
    updated_at = Column(DateTime(), nullable=False, default=naive_utc_now, onupdate=naive_utc_now)


__all__ = ["NotificationPreferenceModel"]
