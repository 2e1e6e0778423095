"""SQLAlchemy model for email delivery attempts."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from app.infrastructure.database import Base
from app.utils import naive_utc_now


class EmailLogModel(Base):
    """Append-only log of outbound notification emails."""

    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    notification_id = Column(
        Integer, ForeignKey("notifications.id", ondelete="SET NULL"), nullable=True
    )
    email_type = Column(String(50), nullable=False)
    recipient_email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="sent", index=True)
    provider_message_id = Column(String(255), nullable=True)
    attempts = Column(Integer, nullable=False, default=1)
    last_error = Column(Text, nullable=True)
    sent_at = Column(DateTime(), nullable=False, default=naive_utc_now, index=True)


__all__ = ["EmailLogModel"]
