"""SQLAlchemy model for security audit events."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

from app.infrastructure.database import Base
from app.utils import naive_utc_now

_metadata_json_type = JSONB().with_variant(JSON(), "sqlite").with_variant(JSON(), "mssql")


class SecurityEventModel(Base):
    """Insert-only record of a security relevant user action."""

    __tablename__ = "security_events"
    __table_args__ = (
        Index("security_events_user_id_timestamp_idx", "user_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    event_type = Column(String(50), nullable=False)
    ip_address = Column(String(64), nullable=False)
    user_agent = Column(Text, nullable=False)
    # ``metadata`` is reserved by the declarative base.
    event_metadata = Column("metadata", _metadata_json_type, nullable=True)
    timestamp = Column(DateTime(), nullable=False, default=naive_utc_now)


__all__ = ["SecurityEventModel"]
