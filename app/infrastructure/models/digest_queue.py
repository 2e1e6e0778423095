"""SQLAlchemy model for notifications deferred to a digest email."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import expression

from app.infrastructure.database import Base
from app.utils import naive_utc_now


class DigestQueueModel(Base):
    """Queue of notifications awaiting the digest batch sender."""

    __tablename__ = "digest_queue"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    notification_id = Column(
        Integer, ForeignKey("notifications.id", ondelete="CASCADE"), nullable=False
    )
    digest_type = Column(String(10), nullable=False, index=True)
    scheduled_for = Column(DateTime(), nullable=False, index=True)
    processed = Column(
        Boolean, nullable=False, default=False, server_default=expression.false(), index=True
    )
    processed_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=naive_utc_now)


__all__ = ["DigestQueueModel"]
